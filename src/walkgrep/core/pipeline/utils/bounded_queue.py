"""Bounded queue for pipeline backpressure control.

This module provides BoundedQueue, a thread-safe queue wrapper with size
limits. Producers block while the queue is full; every blocking call can
also be interrupted by the pipeline's stop event so no worker waits on a
queue that nobody will ever drain.
"""

from __future__ import annotations

import queue
import threading
from typing import Any

from walkgrep.shared.constants import Pipeline


class BoundedQueue:
    """Thread-safe queue with size limits for backpressure control.

    Wraps Python's queue.Queue. ``None`` is reserved as the "stopped"
    return value of :meth:`get_unless_stopped` and cannot be enqueued.

    Args:
        maxsize: Maximum number of items the queue can hold.
                0 means unlimited size.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=maxsize)
        self._maxsize = maxsize

    def put(
        self,
        item: Any,
        block: bool = True,
        timeout: float | None = None,
    ) -> None:
        """Put an item into the queue.

        Args:
            item: The item to put into the queue.
            block: If True, block until a slot is available.
            timeout: Maximum time to wait if blocking.

        Raises:
            ValueError: If item is None.
            queue.Full: If the queue is full and block is False.
        """
        if item is None:
            msg = "Cannot add None to queue"
            raise ValueError(msg)
        self._queue.put(item, block=block, timeout=timeout)

    def get(self, block: bool = True, timeout: float | None = None) -> Any:
        """Get an item from the queue.

        Raises:
            queue.Empty: If no item arrived in time or block is False.
        """
        return self._queue.get(block=block, timeout=timeout)

    def put_unless_stopped(
        self,
        item: Any,
        stop_event: threading.Event,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> bool:
        """Block until the item is enqueued or the stop event is set.

        Args:
            item: The item to put into the queue.
            stop_event: Event that aborts the wait once set.
            poll_interval: How often the stop event is checked.

        Returns:
            True if the item was enqueued, False if the wait was aborted.
        """
        while not stop_event.is_set():
            try:
                self.put(item, timeout=poll_interval)
            except queue.Full:
                continue
            return True
        return False

    def get_unless_stopped(
        self,
        stop_event: threading.Event,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> Any | None:
        """Block until an item is available or the stop event is set.

        Returns:
            The next item, or None once the stop event is set.
        """
        while not stop_event.is_set():
            try:
                return self._queue.get(timeout=poll_interval)
            except queue.Empty:
                continue
        return None

    def qsize(self) -> int:
        """Return the approximate size of the queue."""
        return self._queue.qsize()

    def empty(self) -> bool:
        """Return True if the queue is empty."""
        return self._queue.empty()

    def full(self) -> bool:
        """Return True if the queue is full."""
        return self._queue.full()

    @property
    def maxsize(self) -> int:
        """Get the maximum size of the queue."""
        return self._maxsize
