"""Convert a single file: decode, normalize, resolve destination, encode."""
import logging
import threading
from pathlib import Path
from typing import Optional

from imageflip.conversion import formats
from imageflip.conversion.codec import PillowCodec, normalize
from imageflip.conversion.exceptions import InvalidPathError, UnsupportedFormatError
from imageflip.conversion.models import ConversionOutcome, FailureReason
from imageflip.conversion.paths import resolve_output_path

logger = logging.getLogger("imageflip.worker")


class ConversionWorker:
    """Handles one candidate at a time; failures are returned, never raised."""

    def __init__(self, codec=None, cancel_event: Optional[threading.Event] = None):
        self.codec = codec or PillowCodec()
        self.cancel_event = cancel_event

    def _fail(self, source: Path, reason: FailureReason, error: str) -> ConversionOutcome:
        logger.error("Failed to convert %s (%s): %s", source, reason.value, error)
        return ConversionOutcome.failed(source, reason, error)

    def convert(
        self,
        candidate: Path,
        target_ext: str,
        output_root: Optional[Path] = None,
        sequence: int = 1,
        total: int = 1,
    ) -> ConversionOutcome:
        candidate = Path(candidate)
        if self.cancel_event is not None and self.cancel_event.is_set():
            return ConversionOutcome.failed(candidate, FailureReason.CANCELLED, "Batch cancelled")

        try:
            decoded = self.codec.decode(candidate)
        except Exception as e:
            return self._fail(candidate, FailureReason.DECODE, f"Failed to load image: {e}")

        try:
            return self._write(decoded, candidate, target_ext, output_root, sequence, total)
        finally:
            decoded.close()

    def _write(self, decoded, candidate, target_ext, output_root, sequence, total) -> ConversionOutcome:
        try:
            image = normalize(decoded)
        except Exception as e:
            return self._fail(candidate, FailureReason.DECODE, f"Failed to normalize image: {e}")

        try:
            try:
                fmt = formats.lookup(target_ext)
            except UnsupportedFormatError as e:
                return self._fail(candidate, FailureReason.UNSUPPORTED_TARGET, str(e))

            try:
                dest = resolve_output_path(candidate, output_root, target_ext)
            except InvalidPathError as e:
                return self._fail(candidate, FailureReason.PATH, str(e))
            except OSError as e:
                return self._fail(candidate, FailureReason.PATH, f"Cannot create output directory: {e}")

            try:
                self.codec.encode(image, fmt, dest)
            except Exception as e:
                return self._fail(candidate, FailureReason.ENCODE, f"Error when converting file: {e}")
        finally:
            if image is not decoded:
                image.close()

        logger.info("Converting image (#%s of %s) %s to .%s", sequence, total, dest.stem, target_ext)
        return ConversionOutcome.succeeded(candidate, dest)
