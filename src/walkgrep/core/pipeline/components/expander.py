"""Directory expander workers.

A DirectoryExpander takes one batch of directories from the directory
queue, lists each of them, sends every regular file to the file queue and
sends the subdirectories found in the whole batch back as one new batch.
Entries are classified without following symbolic links, so a link to a
file or to a directory is neither scanned nor descended into.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import TYPE_CHECKING

from walkgrep.core.pipeline.utils import BoundedQueue
from walkgrep.shared.constants import Pipeline
from walkgrep.shared.errors import create_scan_error
from walkgrep.shared.logging import log_operation_success

if TYPE_CHECKING:
    from walkgrep.core.pipeline.domain.coordinator import Coordinator

logger = logging.getLogger(__name__)


def list_directory(path: str) -> tuple[list[str], list[str]]:
    """List the regular files and subdirectories of one directory.

    Returns:
        Tuple of (files, subdirectories) as absolute paths.

    Raises:
        OSError: If the directory cannot be listed.
    """
    files: list[str] = []
    subdirectories: list[str] = []
    with os.scandir(path) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                subdirectories.append(os.path.join(path, entry.name))
            elif entry.is_file(follow_symlinks=False):
                files.append(os.path.join(path, entry.name))
    return files, subdirectories


class DirectoryExpander(threading.Thread):
    """Worker thread that expands directory batches one level deeper.

    Args:
        file_queue: Queue of absolute file paths.
        dir_queue: Queue of directory batches, consumed and produced.
        coordinator: Shared run state.
        worker_id: Optional identifier for this worker thread.
        poll_interval: How often blocked calls re-check the stop event.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        file_queue: BoundedQueue,
        dir_queue: BoundedQueue,
        coordinator: Coordinator,
        worker_id: str | None = None,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> None:
        self.worker_id = worker_id or f"expander_{id(self)}"
        super().__init__(name=f"walkgrep-{self.worker_id}", daemon=True)
        self.file_queue = file_queue
        self.dir_queue = dir_queue
        self.coordinator = coordinator
        self.poll_interval = poll_interval

    def run(self) -> None:
        """Main worker loop: expand batches until the run stops."""
        stop_event = self.coordinator.stop_event
        while True:
            batch = self.dir_queue.get_unless_stopped(stop_event, self.poll_interval)
            if batch is None:
                break
            try:
                keep_going = self.expand(batch)
            finally:
                self.coordinator.work_done()
            if not keep_going:
                break
        logger.debug("Directory expander %s stopped", self.worker_id)

    def expand(self, batch: list[str]) -> bool:
        """Expand one batch of directories.

        Returns:
            False if the worker must stop (fatal error or stop signal).
        """
        start_time = time.time()
        stop_event = self.coordinator.stop_event
        next_batch: list[str] = []
        files_sent = 0

        for directory in batch:
            if stop_event.is_set():
                return False

            try:
                files, subdirectories = list_directory(directory)
            except OSError as e:
                error = create_scan_error(directory, e, "list_directory", directory=True)
                self.coordinator.record_error(error)
                if error.fatal:
                    return False
                continue

            self.coordinator.stats.increment_directories_listed()
            next_batch.extend(subdirectories)

            for path in files:
                self.coordinator.add_work()
                if not self.file_queue.put_unless_stopped(path, stop_event, self.poll_interval):
                    self.coordinator.work_done()
                    return False
                self.coordinator.stats.increment_files_queued()
                files_sent += 1

        if next_batch:
            self.coordinator.add_work()
            if not self.dir_queue.put_unless_stopped(next_batch, stop_event, self.poll_interval):
                self.coordinator.work_done()
                return False

        log_operation_success(
            logger,
            "expand_batch",
            (time.time() - start_time) * 1000,
            {
                "worker_id": self.worker_id,
                "directories": len(batch),
                "files": files_sent,
                "subdirectories": len(next_batch),
            },
        )
        return True


class DirectoryExpanderPool:
    """Pool of DirectoryExpander threads.

    Args:
        num_workers: Number of worker threads to create.
        file_queue: Queue of absolute file paths.
        dir_queue: Queue of directory batches.
        coordinator: Shared run state.
        poll_interval: How often blocked calls re-check the stop event.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        num_workers: int,
        file_queue: BoundedQueue,
        dir_queue: BoundedQueue,
        coordinator: Coordinator,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> None:
        self.num_workers = num_workers
        self.file_queue = file_queue
        self.dir_queue = dir_queue
        self.coordinator = coordinator
        self.poll_interval = poll_interval
        self.workers: list[DirectoryExpander] = []
        self._started = False

    def start(self) -> None:
        """Start all worker threads."""
        if self._started:
            raise RuntimeError("Directory expander pool has already been started")

        for i in range(self.num_workers):
            worker = DirectoryExpander(
                file_queue=self.file_queue,
                dir_queue=self.dir_queue,
                coordinator=self.coordinator,
                worker_id=f"expander_{i}",
                poll_interval=self.poll_interval,
            )
            self.workers.append(worker)
            worker.start()

        self._started = True

    def join(self, timeout: float | None = None) -> None:
        """Wait for all worker threads to complete."""
        if not self._started:
            raise RuntimeError("Directory expander pool has not been started")

        for worker in self.workers:
            worker.join(timeout=timeout)

    def is_alive(self) -> bool:
        return any(worker.is_alive() for worker in self.workers)

    def get_worker_count(self) -> int:
        return len(self.workers)

    def get_alive_worker_count(self) -> int:
        return sum(1 for worker in self.workers if worker.is_alive())
