"""Root path dispatcher.

PathDispatcher turns the caller's root paths into the first units of work:
regular files go straight to the file queue, directories are collected
into one batch for the directory queue.
"""

from __future__ import annotations

import logging
import os
import stat
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


class PathDispatcher(threading.Thread):
    """Thread that seeds the file and directory queues from the roots.

    The coordinator must already account for one in-flight unit standing
    for the dispatch itself; the dispatcher releases it when it is done so
    the run cannot complete while roots are still being examined.

    Args:
        roots: Root paths given by the caller.
        file_queue: Queue of absolute file paths.
        dir_queue: Queue of directory batches.
        coordinator: Shared run state.
        poll_interval: How often blocked puts re-check the stop event.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        roots: list[str],
        file_queue: BoundedQueue,
        dir_queue: BoundedQueue,
        coordinator: Coordinator,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> None:
        super().__init__(name="walkgrep-dispatcher", daemon=True)
        self.roots = list(roots)
        self.file_queue = file_queue
        self.dir_queue = dir_queue
        self.coordinator = coordinator
        self.poll_interval = poll_interval

    def run(self) -> None:
        try:
            self.dispatch()
        finally:
            self.coordinator.work_done()

    def dispatch(self) -> None:
        """Classify every root and enqueue it.

        Roots that cannot be examined are recorded as skippable errors,
        whatever the underlying cause.
        """
        start_time = time.time()
        stop_event = self.coordinator.stop_event
        directories: list[str] = []

        for root in self.roots:
            if stop_event.is_set():
                return
            try:
                path = os.path.abspath(root)
                mode = os.stat(path).st_mode
            except (OSError, ValueError) as e:
                self.coordinator.record_error(
                    create_scan_error(str(root), e, "stat_root", skippable=True),
                )
                continue

            if stat.S_ISREG(mode):
                self.coordinator.add_work()
                if not self.file_queue.put_unless_stopped(path, stop_event, self.poll_interval):
                    self.coordinator.work_done()
                    return
                self.coordinator.stats.increment_files_queued()
            elif stat.S_ISDIR(mode):
                directories.append(path)
            else:
                logger.debug("Ignoring root that is neither file nor directory: %s", path)

        self.coordinator.add_work()
        if not self.dir_queue.put_unless_stopped(directories, stop_event, self.poll_interval):
            self.coordinator.work_done()
            return

        log_operation_success(
            logger,
            "dispatch_roots",
            (time.time() - start_time) * 1000,
            {"roots": len(self.roots), "directories": len(directories)},
        )
