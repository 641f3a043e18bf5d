from .exceptions import ConversionError, InvalidPathError, StartupError, UnsupportedFormatError
from .formats import ImageFormat, lookup
from .models import ConversionOutcome, ConversionRequest, FailureReason, OutcomeStatus
from .worker import ConversionWorker

__all__ = [
    "ConversionError",
    "ConversionOutcome",
    "ConversionRequest",
    "ConversionWorker",
    "FailureReason",
    "ImageFormat",
    "InvalidPathError",
    "OutcomeStatus",
    "StartupError",
    "UnsupportedFormatError",
    "lookup",
]
