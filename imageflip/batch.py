"""Parallel batch conversion with shared progress accounting."""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from imageflip.config import MAX_WORKERS
from imageflip.conversion.models import ConversionOutcome, FailureReason
from imageflip.conversion.worker import ConversionWorker

logger = logging.getLogger("imageflip.batch")


class ProgressCounter:
    """Thread-safe counter handing out 1-based sequence numbers."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass
class BatchReport:
    outcomes: list[ConversionOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failures(self) -> list[ConversionOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def failed(self) -> int:
        return len(self.failures)


class BatchCoordinator:
    """Fans candidates out over a thread pool; one failure never stops the others."""

    def __init__(
        self,
        worker: Optional[ConversionWorker] = None,
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.worker = worker or ConversionWorker()
        # An event the worker already carries is shared, never replaced.
        self.cancel_event = cancel_event or self.worker.cancel_event or threading.Event()
        self.worker.cancel_event = self.cancel_event
        self.max_workers = max_workers or MAX_WORKERS

    def _dispatch(
        self,
        counter: ProgressCounter,
        candidate: Path,
        target_ext: str,
        output_root: Optional[Path],
        total: int,
    ) -> ConversionOutcome:
        sequence = counter.next()
        return self.worker.convert(candidate, target_ext, output_root, sequence=sequence, total=total)

    def run(
        self,
        candidates: Sequence[Path],
        target_ext: str,
        output_root: Optional[Path] = None,
    ) -> list[ConversionOutcome]:
        """Convert every candidate. Outcome order is completion order, not input order."""
        candidates = list(candidates)
        total = len(candidates)
        counter = ProgressCounter()
        if total == 0:
            logger.info("No files to convert")
            return []
        if total == 1:
            return [self._dispatch(counter, candidates[0], target_ext, output_root, total)]

        workers = min(self.max_workers, total)
        logger.debug("Converting %s file(s) with max_workers=%s", total, workers)
        outcomes: list[ConversionOutcome] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._dispatch, counter, path, target_ext, output_root, total): path
                for path in candidates
            }
            try:
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        outcomes.append(future.result())
                    except Exception as e:
                        logger.exception("Task failed for %s: %s", path, e)
                        outcomes.append(ConversionOutcome.failed(path, FailureReason.INTERNAL, str(e)))
            except KeyboardInterrupt:
                # Items not yet started see the flag and return without work.
                self.cancel()
                raise
        return outcomes

    def cancel(self) -> None:
        """Ask workers to skip items not yet started."""
        self.cancel_event.set()
