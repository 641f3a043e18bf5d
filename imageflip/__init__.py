"""Batch image format converter."""

__version__ = "1.0.0"
