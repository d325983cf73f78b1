"""Search engine configuration model.

This module contains the configuration model for the traversal engine:
context window, worker pool sizing, queue capacities and read limits.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

from walkgrep.shared.constants import Encoding, FileLimits, Pipeline


def default_worker_count() -> int:
    """Workers per stage: a quarter of the CPUs, never fewer than two."""
    cpus = os.cpu_count() or 1
    return max(Pipeline.MIN_WORKERS, cpus // Pipeline.CPU_DIVISOR)


class SearchSettings(BaseModel):
    """Search configuration.

    This class manages how one search run is sized: the context window,
    the number of workers per stage and the capacity of each queue.
    """

    context_size: int = Field(
        default=FileLimits.NO_CONTEXT,
        ge=0,
        description="Lines of context shown on each side of a match",
    )
    num_workers: int = Field(
        default_factory=default_worker_count,
        ge=Pipeline.MIN_WORKERS,
        description="Worker threads per stage (directory expanders, file scanners)",
    )
    file_queue_size: int = Field(
        default=Pipeline.FILE_QUEUE_SIZE,
        gt=0,
        description="Capacity of the file path queue",
    )
    result_queue_size: int = Field(
        default=Pipeline.RESULT_QUEUE_SIZE,
        gt=0,
        description="Capacity of the result stream",
    )
    max_line_bytes: int = Field(
        default=FileLimits.MAX_LINE_BYTES,
        gt=0,
        description="Longest line accepted before a file is skipped",
    )
    poll_interval: float = Field(
        default=Pipeline.POLL_INTERVAL,
        gt=0,
        description="Seconds between stop-signal checks in blocked workers",
    )
    shutdown_timeout: float = Field(
        default=Pipeline.SHUTDOWN_TIMEOUT,
        gt=0,
        description="Seconds to wait for each worker thread on shutdown",
    )

    @property
    def encoding(self) -> str:
        """Files are always decoded as UTF-8."""
        return Encoding.DEFAULT


__all__ = ["SearchSettings", "default_worker_count"]
