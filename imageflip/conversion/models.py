"""Conversion request/outcome models."""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureReason(str, Enum):
    DECODE = "decode"
    UNSUPPORTED_TARGET = "unsupported_target"
    PATH = "path"
    ENCODE = "encode"
    CANCELLED = "cancelled"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ConversionRequest:
    source_path: Path
    target_ext: str
    output_root: Optional[Path] = None


@dataclass(frozen=True)
class ConversionOutcome:
    """Result of converting one file. Never affects sibling items."""

    status: OutcomeStatus
    source_path: Path
    dest_path: Optional[Path] = None
    reason: Optional[FailureReason] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, source_path: Path, dest_path: Path) -> "ConversionOutcome":
        return cls(OutcomeStatus.SUCCEEDED, source_path, dest_path=dest_path)

    @classmethod
    def failed(cls, source_path: Path, reason: FailureReason, error: str) -> "ConversionOutcome":
        return cls(OutcomeStatus.FAILED, source_path, reason=reason, error=error)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED
