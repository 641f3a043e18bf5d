"""Tests for BatchCoordinator and ProgressCounter."""
import random
import threading
import time
from pathlib import Path

import pytest

from imageflip.batch import BatchCoordinator, BatchReport, ProgressCounter
from imageflip.conversion import ConversionOutcome, ConversionWorker, FailureReason


class RecordingWorker:
    """Records the sequence numbers it is handed; never touches the filesystem."""

    def __init__(self):
        self.cancel_event = None
        self.calls = []
        self._lock = threading.Lock()

    def convert(self, candidate, target_ext, output_root=None, sequence=1, total=1):
        time.sleep(random.uniform(0, 0.005))
        with self._lock:
            self.calls.append((candidate, sequence, total))
        return ConversionOutcome.succeeded(Path(candidate), Path(candidate).with_suffix(f".{target_ext}"))


class ExplodingWorker(RecordingWorker):
    def convert(self, candidate, target_ext, output_root=None, sequence=1, total=1):
        if Path(candidate).name == "bad.png":
            raise RuntimeError("boom")
        return super().convert(candidate, target_ext, output_root, sequence, total)


class TestProgressCounter:
    """Tests for ProgressCounter."""

    def test_starts_at_one(self):
        counter = ProgressCounter()
        assert counter.next() == 1
        assert counter.next() == 2
        assert counter.value == 2

    def test_concurrent_increments_are_unique(self):
        """Test no two threads observe the same number."""
        counter = ProgressCounter()
        seen = []
        lock = threading.Lock()

        def grab():
            for _ in range(200):
                n = counter.next()
                with lock:
                    seen.append(n)

        threads = [threading.Thread(target=grab) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(seen) == list(range(1, 1601))


class TestBatchCoordinator:
    """Tests for BatchCoordinator.run."""

    def test_sequence_numbers_form_permutation(self):
        """Test sequence numbers cover 1..N exactly once."""
        worker = RecordingWorker()
        candidates = [Path(f"img{i}.png") for i in range(25)]
        outcomes = BatchCoordinator(worker=worker, max_workers=6).run(candidates, "jpg")

        assert len(outcomes) == 25
        assert sorted(seq for _, seq, _ in worker.calls) == list(range(1, 26))
        assert {total for _, _, total in worker.calls} == {25}
        assert {c for c, _, _ in worker.calls} == set(candidates)

    def test_empty_batch(self):
        worker = RecordingWorker()
        assert BatchCoordinator(worker=worker).run([], "png") == []
        assert worker.calls == []

    def test_single_item_uses_same_worker_contract(self):
        worker = RecordingWorker()
        outcomes = BatchCoordinator(worker=worker).run([Path("one.bmp")], "png")
        assert worker.calls == [(Path("one.bmp"), 1, 1)]
        assert outcomes[0].ok

    def test_failure_isolation_with_corrupt_file(self, tmp_path, make_image, corrupt_file):
        """Test a corrupt middle file fails alone."""
        candidates = [
            make_image(tmp_path / "a.png"),
            corrupt_file(tmp_path / "b.png"),
            make_image(tmp_path / "c.png"),
        ]
        outcomes = BatchCoordinator(max_workers=3).run(candidates, "jpg")
        by_source = {o.source_path.name: o for o in outcomes}

        assert by_source["a.png"].ok
        assert by_source["c.png"].ok
        assert not by_source["b.png"].ok
        assert by_source["b.png"].reason is FailureReason.DECODE
        assert (tmp_path / "a.jpg").is_file()
        assert (tmp_path / "c.jpg").is_file()
        assert not (tmp_path / "b.jpg").exists()

    def test_unexpected_worker_exception_is_captured(self):
        worker = ExplodingWorker()
        candidates = [Path("ok1.png"), Path("bad.png"), Path("ok2.png")]
        outcomes = BatchCoordinator(worker=worker, max_workers=2).run(candidates, "gif")

        failed = [o for o in outcomes if not o.ok]
        assert len(outcomes) == 3
        assert len(failed) == 1
        assert failed[0].reason is FailureReason.INTERNAL
        assert failed[0].source_path == Path("bad.png")

    def test_shared_output_root(self, tmp_path, make_image):
        candidates = [make_image(tmp_path / f"img{i}.png") for i in range(6)]
        outcomes = BatchCoordinator(max_workers=6).run(candidates, "bmp", output_root=tmp_path / "out")
        assert all(o.ok for o in outcomes)
        assert sorted(p.name for p in (tmp_path / "out").iterdir()) == [f"img{i}.bmp" for i in range(6)]

    def test_cancel_skips_remaining(self, tmp_path, make_image):
        candidates = [make_image(tmp_path / f"img{i}.png") for i in range(3)]
        coordinator = BatchCoordinator(max_workers=2)
        coordinator.cancel()
        outcomes = coordinator.run(candidates, "jpg")
        assert {o.reason for o in outcomes} == {FailureReason.CANCELLED}

    def test_worker_shares_cancel_event(self):
        event = threading.Event()
        worker = RecordingWorker()
        coordinator = BatchCoordinator(worker=worker, cancel_event=event)
        assert worker.cancel_event is event
        assert coordinator.cancel_event is event

    def test_invalid_max_workers(self):
        with pytest.raises(ValueError, match="max_workers must be >= 1"):
            BatchCoordinator(max_workers=0)


class TestBatchReport:
    """Tests for BatchReport."""

    def test_counts(self):
        report = BatchReport(
            outcomes=[
                ConversionOutcome.succeeded(Path("a.png"), Path("a.jpg")),
                ConversionOutcome.failed(Path("b.png"), FailureReason.DECODE, "bad"),
            ]
        )
        assert report.total == 2
        assert report.succeeded == 1
        assert report.failed == 1
        assert report.failures[0].source_path == Path("b.png")


class TestCancellation:
    """Tests for the shared cancellation flag."""

    def test_reuses_event_carried_by_worker(self, tmp_path, make_image):
        """Test setting the worker's own event cancels the batch."""
        event = threading.Event()
        worker = ConversionWorker(cancel_event=event)
        coordinator = BatchCoordinator(worker=worker, max_workers=2)
        assert coordinator.cancel_event is event
        assert worker.cancel_event is event

        event.set()
        candidates = [make_image(tmp_path / "a.png"), make_image(tmp_path / "b.png")]
        outcomes = coordinator.run(candidates, "jpg")

        assert {o.reason for o in outcomes} == {FailureReason.CANCELLED}
        assert not (tmp_path / "a.jpg").exists()
        assert not (tmp_path / "b.jpg").exists()

    def test_explicit_event_wins(self):
        own, explicit = threading.Event(), threading.Event()
        worker = ConversionWorker(cancel_event=own)
        coordinator = BatchCoordinator(worker=worker, cancel_event=explicit)
        assert coordinator.cancel_event is explicit
        assert worker.cancel_event is explicit

    def test_interrupt_sets_cancel_flag(self, monkeypatch):
        """Test Ctrl-C while waiting flags remaining items and re-raises."""

        def interrupted(futures):
            raise KeyboardInterrupt
            yield  # pragma: no cover

        monkeypatch.setattr("imageflip.batch.as_completed", interrupted)
        coordinator = BatchCoordinator(worker=RecordingWorker(), max_workers=2)

        with pytest.raises(KeyboardInterrupt):
            coordinator.run([Path("a.png"), Path("b.png")], "jpg")
        assert coordinator.cancel_event.is_set()
