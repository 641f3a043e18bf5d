"""Exceptions for image conversion operations."""
from pathlib import Path


class ConversionError(Exception):
    """Base exception for conversion operations."""


class UnsupportedFormatError(ConversionError):
    """Extension is not one of the supported image formats."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unable to convert to '{extension}', this format is unsupported")


class InvalidPathError(ConversionError):
    """Source path cannot be mapped to a destination path."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class StartupError(ConversionError):
    """Invalid invocation detected before any conversion work starts."""
