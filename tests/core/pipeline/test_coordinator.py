"""Unit tests for the run-wide Coordinator state."""

from __future__ import annotations

import logging
import threading

import pytest

from walkgrep.core.pipeline.domain.coordinator import Coordinator, ErrorSlot, VisitedSet
from walkgrep.shared.errors import ErrorCode, ScanError


def _skippable(path: str = "/data/a.txt") -> ScanError:
    return ScanError(ErrorCode.PERMISSION_DENIED, f"denied: {path}", path)


def _fatal(path: str = "/data/b.txt") -> ScanError:
    return ScanError(ErrorCode.FILE_READ_ERROR, f"broken: {path}", path)


class TestVisitedSet:
    """Test cases for VisitedSet."""

    def test_first_claim_wins(self) -> None:
        visited = VisitedSet()

        assert visited.claim("/a") is True
        assert visited.claim("/a") is False
        assert "/a" in visited
        assert len(visited) == 1

    def test_only_one_thread_claims_a_path(self) -> None:
        # Given
        visited = VisitedSet()
        winners: list[bool] = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def claim() -> None:
            barrier.wait()
            won = visited.claim("/shared/file.txt")
            with lock:
                winners.append(won)

        threads = [threading.Thread(target=claim) for _ in range(8)]

        # When
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Then
        assert winners.count(True) == 1


class TestErrorSlot:
    """Test cases for ErrorSlot."""

    def test_first_write_wins(self) -> None:
        slot = ErrorSlot()
        first, second = _skippable(), _fatal()

        assert slot.set_if_absent(first) is True
        assert slot.set_if_absent(second) is False
        assert slot.error is first


class TestInFlightTracking:
    """Completion detection through the in-flight counter."""

    def test_reaching_zero_raises_stop(self) -> None:
        coordinator = Coordinator()
        coordinator.add_work(2)

        coordinator.work_done()
        assert not coordinator.stop_event.is_set()

        coordinator.work_done()
        assert coordinator.stop_event.is_set()
        assert coordinator.completed
        assert coordinator.inflight == 0

    def test_work_done_without_work_is_an_error(self) -> None:
        coordinator = Coordinator()

        with pytest.raises(RuntimeError):
            coordinator.work_done()

    def test_units_dropped_after_stop_do_not_complete(self) -> None:
        coordinator = Coordinator()
        coordinator.add_work()
        coordinator.cancel()

        coordinator.work_done()

        assert coordinator.cancelled
        assert not coordinator.completed


class TestErrorRecording:
    """Skippable versus fatal errors."""

    def test_skippable_error_does_not_stop(self, caplog) -> None:
        coordinator = Coordinator()
        error = _skippable()

        with caplog.at_level(logging.WARNING, logger="walkgrep"):
            coordinator.record_error(error)

        assert not coordinator.stop_event.is_set()
        assert coordinator.first_error is error
        assert coordinator.fatal_error is None
        assert coordinator.error is error
        assert coordinator.stats.skippable_errors == 1
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_fatal_error_stops_and_becomes_definitive(self) -> None:
        # Given: a skippable error was recorded first
        coordinator = Coordinator()
        skippable, fatal = _skippable(), _fatal()
        coordinator.record_error(skippable)

        # When
        coordinator.record_error(fatal)

        # Then
        assert coordinator.stop_event.is_set()
        assert coordinator.first_error is skippable
        assert coordinator.fatal_error is fatal
        assert coordinator.error is fatal
        assert coordinator.stats.fatal_errors == 1

    def test_only_first_fatal_error_is_kept(self) -> None:
        coordinator = Coordinator()
        first, second = _fatal("/x"), _fatal("/y")

        coordinator.record_error(first)
        coordinator.record_error(second)

        assert coordinator.error is first
        assert coordinator.stats.fatal_errors == 2

    def test_explicit_skippable_override(self) -> None:
        coordinator = Coordinator()
        error = ScanError(ErrorCode.FILE_READ_ERROR, "root unreadable", "/r", skippable=True)

        coordinator.record_error(error)

        assert not coordinator.stop_event.is_set()


class TestCancel:
    """Caller-initiated cancellation."""

    def test_cancel_sets_stop(self) -> None:
        coordinator = Coordinator()
        coordinator.add_work()

        coordinator.cancel()

        assert coordinator.stop_event.is_set()
        assert coordinator.cancelled

    def test_cancel_after_completion_is_a_no_op(self) -> None:
        coordinator = Coordinator()
        coordinator.add_work()
        coordinator.work_done()

        coordinator.cancel()

        assert coordinator.completed
        assert not coordinator.cancelled
