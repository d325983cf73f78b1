"""Search orchestration and component factory.

This module provides the public entry points of the traversal engine:
- start(): compile the pattern, wire every component and start the run
- SearchRun: handle on a running search (results, wait, cancel)
- run_search(): drain a run and return a SearchOutcome
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any

from walkgrep.config.models import SearchSettings
from walkgrep.core.models import FileResult
from walkgrep.core.pipeline.components import (
    DirectoryExpanderPool,
    FileScannerPool,
    PathDispatcher,
    ResultStream,
)
from walkgrep.core.pipeline.domain.coordinator import Coordinator
from walkgrep.core.pipeline.domain.lifecycle import (
    Supervisor,
    start_pipeline_components,
)
from walkgrep.core.pipeline.domain.statistics import (
    format_statistics,
    statistics_to_dict,
)
from walkgrep.core.pipeline.utils import BoundedQueue, TraversalStatistics
from walkgrep.shared.errors import InvalidPatternError, ScanError

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a search pattern.

    Raises:
        InvalidPatternError: If the pattern is not a valid regular expression.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, original_error=e) from e


class SearchRun:
    """A running search.

    Iterating the run yields FileResult objects as scanner workers produce
    them, in no particular order between files. Consume the results before
    calling :meth:`wait`: workers block once the result stream is full.

    Leaving a ``with`` block or abandoning the iterator early cancels an
    unfinished run.

    Args:
        pattern: Compiled search pattern.
        context_size: Lines of context on each side of a match.
        roots: Root paths to search.
        settings: Pool sizes, queue capacities and read limits.
    """

    def __init__(
        self,
        pattern: re.Pattern[str],
        context_size: int,
        roots: Sequence[str],
        settings: SearchSettings,
    ) -> None:
        self.pattern = pattern
        self.context_size = context_size
        self.roots = list(roots)
        self.settings = settings
        self.statistics = TraversalStatistics()
        self.coordinator = Coordinator(self.statistics)

        self.file_queue = BoundedQueue(maxsize=settings.file_queue_size)
        # At most one batch per tree level is outstanding
        self.dir_queue = BoundedQueue(maxsize=settings.num_workers)
        self._results = ResultStream(
            maxsize=settings.result_queue_size,
            poll_interval=settings.poll_interval,
        )

        self.dispatcher = PathDispatcher(
            self.roots,
            self.file_queue,
            self.dir_queue,
            self.coordinator,
            poll_interval=settings.poll_interval,
        )
        self.expander_pool = DirectoryExpanderPool(
            settings.num_workers,
            self.file_queue,
            self.dir_queue,
            self.coordinator,
            poll_interval=settings.poll_interval,
        )
        self.scanner_pool = FileScannerPool(
            settings.num_workers,
            self.file_queue,
            self._results,
            self.coordinator,
            pattern,
            context_size,
            max_line_bytes=settings.max_line_bytes,
            poll_interval=settings.poll_interval,
        )
        self._supervisor = Supervisor(
            self.coordinator,
            self.dispatcher,
            self.expander_pool,
            self.scanner_pool,
            self._results,
            timeout=settings.shutdown_timeout,
        )
        self._start_time: float | None = None
        self._end_time: float | None = None

    def _start(self) -> None:
        logger.debug(
            "Starting search for %r in %d root(s) with %d worker(s) per stage",
            self.pattern.pattern,
            len(self.roots),
            self.settings.num_workers,
        )
        self._start_time = time.time()
        try:
            start_pipeline_components(
                self.dispatcher,
                self.expander_pool,
                self.scanner_pool,
                self.coordinator,
            )
        except Exception:
            self._results.close()
            raise
        self._supervisor.start()

    def __iter__(self) -> Iterator[FileResult]:
        exhausted = False
        try:
            yield from self._results
            exhausted = True
        finally:
            if not exhausted:
                self.cancel()

    def results(self) -> Iterator[FileResult]:
        """Return an iterator over the results (same as ``iter(run)``)."""
        return iter(self)

    def wait(self, timeout: float | None = None) -> ScanError | None:
        """Block until every worker has finished.

        Args:
            timeout: Optional maximum wait in seconds.

        Returns:
            The first fatal error, else the first recorded error, else None.

        Raises:
            TimeoutError: If the run did not finish within the timeout.
        """
        if not self._supervisor.finished.wait(timeout):
            msg = f"Search did not finish within {timeout}s"
            raise TimeoutError(msg)
        if self._end_time is None:
            self._end_time = time.time()
        return self.coordinator.error

    def cancel(self) -> None:
        """Raise the stop signal; no new work is started afterwards."""
        self.coordinator.cancel()

    @property
    def done(self) -> bool:
        return self._supervisor.finished.is_set()

    @property
    def cancelled(self) -> bool:
        return self.coordinator.cancelled

    @property
    def duration(self) -> float:
        """Seconds since start, frozen once :meth:`wait` returned."""
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else time.time()
        return end - self._start_time

    def __enter__(self) -> SearchRun:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if not self.done:
            self.cancel()
        self.wait()


def start(
    pattern: str,
    context_size: int,
    roots: Sequence[str],
    *,
    settings: SearchSettings | None = None,
) -> SearchRun:
    """Start a concurrent search and return immediately.

    Args:
        pattern: Regular expression searched in every line (unanchored).
        context_size: Lines of context on each side of a match; values
            below 1 disable context.
        roots: Files and directories to search.
        settings: Optional pool and queue sizing.

    Returns:
        A SearchRun delivering FileResult objects.

    Raises:
        InvalidPatternError: If the pattern does not compile. No thread is
            started in that case.
    """
    compiled = compile_pattern(pattern)
    run = SearchRun(compiled, context_size, roots, settings or SearchSettings())
    run._start()  # pylint: disable=protected-access
    return run


@dataclass
class SearchOutcome:
    """Everything a finished search produced."""

    results: list[FileResult] = field(default_factory=list)
    error: ScanError | None = None
    statistics: TraversalStatistics = field(default_factory=TraversalStatistics)
    duration: float = 0.0

    @property
    def matched(self) -> bool:
        return bool(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [result.to_dict() for result in self.results],
            "error": self.error.to_dict() if self.error else None,
            "statistics": statistics_to_dict(self.statistics, self.duration),
        }


def run_search(
    pattern: str,
    context_size: int,
    roots: Sequence[str],
    *,
    settings: SearchSettings | None = None,
    sort: bool = False,
) -> SearchOutcome:
    """Run a search to completion.

    Args:
        pattern: Regular expression searched in every line.
        context_size: Lines of context on each side of a match.
        roots: Files and directories to search.
        settings: Optional pool and queue sizing.
        sort: Order the results by path.

    Returns:
        SearchOutcome with every result, the run's error and its statistics.

    Raises:
        InvalidPatternError: If the pattern does not compile.
    """
    with start(pattern, context_size, roots, settings=settings) as run:
        results = list(run)
        error = run.wait()

    if sort:
        results.sort(key=lambda result: result.path)

    stats = run.statistics
    logger.info(
        "Search finished in %.2fs: %d file(s) scanned, %d matched, %d error(s)",
        run.duration,
        stats.files_scanned,
        stats.files_matched,
        stats.skippable_errors + stats.fatal_errors,
    )
    logger.debug(format_statistics(stats, run.duration))

    return SearchOutcome(
        results=results,
        error=error,
        statistics=stats,
        duration=run.duration,
    )
