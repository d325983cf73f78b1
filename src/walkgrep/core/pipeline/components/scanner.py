"""File scanner workers.

A FileScanner takes absolute file paths from the file queue, claims each
one in the run's VisitedSet, extracts its context blocks and hands files
with at least one match to the result stream.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from typing import TYPE_CHECKING

from walkgrep.core.models import FileResult
from walkgrep.core.pipeline.components.extractor import (
    ContextExtractor,
    extract_contexts,
)
from walkgrep.core.pipeline.components.result_stream import ResultStream
from walkgrep.core.pipeline.utils import BoundedQueue
from walkgrep.shared.constants import FileLimits, Pipeline
from walkgrep.shared.errors import (
    ErrorCode,
    ErrorContext,
    ScanError,
    create_scan_error,
)
from walkgrep.shared.logging import log_operation_success

if TYPE_CHECKING:
    from walkgrep.core.pipeline.domain.coordinator import Coordinator

logger = logging.getLogger(__name__)


class FileScanner(threading.Thread):
    """Worker thread that searches files taken from the file queue.

    Each worker owns one ContextExtractor and reuses it for every file.

    Args:
        file_queue: Queue of absolute file paths.
        results: Stream receiving one FileResult per matching file.
        coordinator: Shared run state.
        pattern: Compiled search pattern.
        context_size: Lines of context on each side of a match.
        max_line_bytes: Longest accepted line.
        worker_id: Optional identifier for this worker thread.
        poll_interval: How often blocked calls re-check the stop event.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        file_queue: BoundedQueue,
        results: ResultStream,
        coordinator: Coordinator,
        pattern: re.Pattern[str],
        context_size: int,
        max_line_bytes: int = FileLimits.MAX_LINE_BYTES,
        worker_id: str | None = None,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> None:
        self.worker_id = worker_id or f"scanner_{id(self)}"
        super().__init__(name=f"walkgrep-{self.worker_id}", daemon=True)
        self.file_queue = file_queue
        self.results = results
        self.coordinator = coordinator
        self.pattern = pattern
        self.context_size = context_size
        self.max_line_bytes = max_line_bytes
        self.poll_interval = poll_interval
        self._extractor = ContextExtractor(context_size)

    def run(self) -> None:
        """Main worker loop: scan files until the run stops."""
        stop_event = self.coordinator.stop_event
        while True:
            path = self.file_queue.get_unless_stopped(stop_event, self.poll_interval)
            if path is None:
                break
            try:
                keep_going = self.scan(path)
            finally:
                self.coordinator.work_done()
            if not keep_going:
                break
        logger.debug("File scanner %s stopped", self.worker_id)

    def scan(self, path: str) -> bool:
        """Scan one file and deliver its result.

        Returns:
            False if the worker must stop (fatal error or stop signal).
        """
        if not self.coordinator.visited.claim(path):
            self.coordinator.stats.increment_duplicates_skipped()
            return True

        start_time = time.time()
        try:
            blocks = extract_contexts(
                path,
                self.pattern,
                self.context_size,
                self.max_line_bytes,
                extractor=self._extractor,
            )
        except ScanError as e:
            self.coordinator.record_error(e)
            return e.skippable
        except OSError as e:
            error = create_scan_error(path, e, "read_file")
            self.coordinator.record_error(error)
            return error.skippable
        # pylint: disable-next=broad-exception-caught
        except Exception as e:  # noqa: BLE001
            self.coordinator.record_error(
                ScanError(
                    ErrorCode.SCANNER_ERROR,
                    f"Unexpected error while scanning {path}: {e}",
                    path,
                    ErrorContext(
                        file_path=path,
                        operation="scan_file",
                        additional_data={
                            "worker_id": self.worker_id,
                            "error_type": type(e).__name__,
                        },
                    ),
                    original_error=e,
                ),
            )
            return False

        self.coordinator.stats.increment_files_scanned()
        log_operation_success(
            logger,
            "scan_file",
            (time.time() - start_time) * 1000,
            {"worker_id": self.worker_id, "blocks": len(blocks)},
            ErrorContext(file_path=path, operation="scan_file"),
        )

        if not blocks:
            return True

        delivered = self.results.put(
            FileResult(path=path, blocks=tuple(blocks)),
            self.coordinator.stop_event,
        )
        if delivered:
            self.coordinator.stats.increment_files_matched()
        return delivered


class FileScannerPool:
    """Pool of FileScanner threads.

    Args:
        num_workers: Number of worker threads to create.
        file_queue: Queue of absolute file paths.
        results: Stream receiving the results.
        coordinator: Shared run state.
        pattern: Compiled search pattern.
        context_size: Lines of context on each side of a match.
        max_line_bytes: Longest accepted line.
        poll_interval: How often blocked calls re-check the stop event.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        num_workers: int,
        file_queue: BoundedQueue,
        results: ResultStream,
        coordinator: Coordinator,
        pattern: re.Pattern[str],
        context_size: int,
        max_line_bytes: int = FileLimits.MAX_LINE_BYTES,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> None:
        self.num_workers = num_workers
        self.file_queue = file_queue
        self.results = results
        self.coordinator = coordinator
        self.pattern = pattern
        self.context_size = context_size
        self.max_line_bytes = max_line_bytes
        self.poll_interval = poll_interval
        self.workers: list[FileScanner] = []
        self._started = False

    def start(self) -> None:
        """Start all worker threads."""
        if self._started:
            raise RuntimeError("File scanner pool has already been started")

        for i in range(self.num_workers):
            worker = FileScanner(
                file_queue=self.file_queue,
                results=self.results,
                coordinator=self.coordinator,
                pattern=self.pattern,
                context_size=self.context_size,
                max_line_bytes=self.max_line_bytes,
                worker_id=f"scanner_{i}",
                poll_interval=self.poll_interval,
            )
            self.workers.append(worker)
            worker.start()

        self._started = True

    def join(self, timeout: float | None = None) -> None:
        """Wait for all worker threads to complete."""
        if not self._started:
            raise RuntimeError("File scanner pool has not been started")

        for worker in self.workers:
            worker.join(timeout=timeout)

    def is_alive(self) -> bool:
        return any(worker.is_alive() for worker in self.workers)

    def get_worker_count(self) -> int:
        return len(self.workers)

    def get_alive_worker_count(self) -> int:
        return sum(1 for worker in self.workers if worker.is_alive())
