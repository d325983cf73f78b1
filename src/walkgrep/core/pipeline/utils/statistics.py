"""Statistics collectors for the traversal pipeline.

TraversalStatistics provides thread-safe counters shared by the
dispatcher, the directory expanders and the file scanners.
"""

from __future__ import annotations

import threading
from typing import Any


class TraversalStatistics:
    """Statistics collector for one search run.

    Every counter is guarded by the same lock; increments are cheap and
    never happen while a worker holds another lock or performs I/O.
    """

    def __init__(self) -> None:
        """Initialize the statistics with zero counters."""
        self._lock = threading.Lock()
        self._directories_listed = 0
        self._files_queued = 0
        self._files_scanned = 0
        self._files_matched = 0
        self._duplicates_skipped = 0
        self._skippable_errors = 0
        self._fatal_errors = 0

    def increment_directories_listed(self) -> None:
        with self._lock:
            self._directories_listed += 1

    def increment_files_queued(self) -> None:
        with self._lock:
            self._files_queued += 1

    def increment_files_scanned(self) -> None:
        with self._lock:
            self._files_scanned += 1

    def increment_files_matched(self) -> None:
        with self._lock:
            self._files_matched += 1

    def increment_duplicates_skipped(self) -> None:
        with self._lock:
            self._duplicates_skipped += 1

    def increment_errors(self, *, fatal: bool) -> None:
        """Increment the skippable or the fatal error counter."""
        with self._lock:
            if fatal:
                self._fatal_errors += 1
            else:
                self._skippable_errors += 1

    @property
    def directories_listed(self) -> int:
        """Get the number of directories whose children were listed."""
        with self._lock:
            return self._directories_listed

    @property
    def files_queued(self) -> int:
        """Get the number of file paths put on the file queue."""
        with self._lock:
            return self._files_queued

    @property
    def files_scanned(self) -> int:
        """Get the number of files read to the end."""
        with self._lock:
            return self._files_scanned

    @property
    def files_matched(self) -> int:
        """Get the number of files that produced a result."""
        with self._lock:
            return self._files_matched

    @property
    def duplicates_skipped(self) -> int:
        """Get the number of re-discovered paths that were dropped."""
        with self._lock:
            return self._duplicates_skipped

    @property
    def skippable_errors(self) -> int:
        with self._lock:
            return self._skippable_errors

    @property
    def fatal_errors(self) -> int:
        with self._lock:
            return self._fatal_errors

    def snapshot(self) -> dict[str, Any]:
        """Return all counters as one consistent dictionary."""
        with self._lock:
            return {
                "directories_listed": self._directories_listed,
                "files_queued": self._files_queued,
                "files_scanned": self._files_scanned,
                "files_matched": self._files_matched,
                "duplicates_skipped": self._duplicates_skipped,
                "skippable_errors": self._skippable_errors,
                "fatal_errors": self._fatal_errors,
            }
