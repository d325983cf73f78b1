"""Run-wide bookkeeping for one search.

The Coordinator owns the only state shared by more than one worker:

- the in-flight counter that detects completion
- the VisitedSet that keeps two workers from scanning the same file
- the first-error slots (first recorded error, first fatal error)
- the stop event every worker observes

Each structure has its own lock, held only for the check-and-set.
"""

from __future__ import annotations

import logging
import threading

from walkgrep.core.pipeline.utils import TraversalStatistics
from walkgrep.shared.errors import ScanError
from walkgrep.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class VisitedSet:
    """Set of absolute file paths already claimed by a scanner worker."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._paths: set[str] = set()

    def claim(self, path: str) -> bool:
        """Atomically mark a path as visited.

        Returns:
            True if the caller now owns the path, False if another worker
            claimed it before.
        """
        with self._lock:
            if path in self._paths:
                return False
            self._paths.add(path)
            return True

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)


class ErrorSlot:
    """Single-assignment holder: the first write wins, later writes are no-ops."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._error: ScanError | None = None

    def set_if_absent(self, error: ScanError) -> bool:
        """Store the error unless one is already stored.

        Returns:
            True if this call stored the error.
        """
        with self._lock:
            if self._error is not None:
                return False
            self._error = error
            return True

    @property
    def error(self) -> ScanError | None:
        with self._lock:
            return self._error


class Coordinator:
    """Tracks in-flight work, shared state and termination of one run.

    A unit of work is one dispatch of the roots, one directory batch or one
    file. Producers call :meth:`add_work` before enqueueing a unit and
    consumers call :meth:`work_done` after fully processing it; when the
    counter drops to zero the traversal is complete and the stop event is
    set.

    Args:
        stats: Statistics collector shared with the workers.
    """

    def __init__(self, stats: TraversalStatistics | None = None) -> None:
        self.stats = stats or TraversalStatistics()
        self.visited = VisitedSet()
        self.stop_event = threading.Event()
        self._first_error = ErrorSlot()
        self._fatal_error = ErrorSlot()
        self._lock = threading.Lock()
        self._inflight = 0
        self._completed = False
        self._cancelled = False

    @property
    def inflight(self) -> int:
        with self._lock:
            return self._inflight

    @property
    def completed(self) -> bool:
        """True when every unit of work was processed."""
        with self._lock:
            return self._completed

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def add_work(self, count: int = 1) -> None:
        """Register units of work about to be enqueued."""
        with self._lock:
            self._inflight += count

    def work_done(self) -> None:
        """Mark one unit of work as fully processed."""
        with self._lock:
            if self._inflight <= 0:
                msg = "work_done() called more often than add_work()"
                raise RuntimeError(msg)
            self._inflight -= 1
            # Units dropped after a stop do not count as a completed traversal
            finished = self._inflight == 0 and not self.stop_event.is_set()
            if finished:
                self._completed = True
        if finished:
            logger.debug("All work units processed, raising stop signal")
            self.stop_event.set()

    def record_error(self, error: ScanError) -> None:
        """Record a traversal error.

        Every error competes for the first-error slot. A fatal error also
        competes for the fatal slot and stops the whole run.
        """
        self.stats.increment_errors(fatal=error.fatal)
        self._first_error.set_if_absent(error)

        if error.skippable:
            log_operation_error(logger, error, level=logging.WARNING)
            return

        log_operation_error(logger, error)
        if self._fatal_error.set_if_absent(error):
            logger.debug("Fatal error, stopping traversal: %s", error.message)
        self.stop_event.set()

    def cancel(self) -> None:
        """Abandon the run: workers stop without starting new work."""
        with self._lock:
            if self._completed or self.stop_event.is_set():
                return
            self._cancelled = True
        logger.info("Search cancelled by caller")
        self.stop_event.set()

    @property
    def first_error(self) -> ScanError | None:
        return self._first_error.error

    @property
    def fatal_error(self) -> ScanError | None:
        return self._fatal_error.error

    @property
    def error(self) -> ScanError | None:
        """The run's definitive error: the first fatal one, else the first one."""
        return self._fatal_error.error or self._first_error.error
