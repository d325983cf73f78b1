"""Result stream between the scanner workers and the caller.

ResultStream is a bounded, closable channel of FileResult objects. The
scanner workers put results into it; the caller iterates it. Iteration
ends once the stream is closed and every buffered result was delivered.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterator

from walkgrep.core.models import FileResult
from walkgrep.core.pipeline.utils import BoundedQueue
from walkgrep.shared.constants import Pipeline

logger = logging.getLogger(__name__)


class ResultStream:
    """Bounded FIFO of FileResult objects with an explicit end.

    Args:
        maxsize: Number of results buffered before producers block.
        poll_interval: How often blocked calls re-check the stream state.
    """

    def __init__(
        self,
        maxsize: int = Pipeline.RESULT_QUEUE_SIZE,
        poll_interval: float = Pipeline.POLL_INTERVAL,
    ) -> None:
        self._queue = BoundedQueue(maxsize=maxsize)
        self._closed = threading.Event()
        self._close_lock = threading.Lock()
        self.poll_interval = poll_interval

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put(self, result: FileResult, stop_event: threading.Event) -> bool:
        """Deliver a result, blocking while the stream is full.

        Returns:
            False if the stream was closed or the stop event was set before
            the result could be delivered.
        """
        if self._closed.is_set():
            return False
        return self._queue.put_unless_stopped(result, stop_event, self.poll_interval)

    def close(self) -> bool:
        """Mark the end of the stream.

        Returns:
            True on the first call, False if the stream was already closed.
        """
        with self._close_lock:
            if self._closed.is_set():
                return False
            self._closed.set()
        logger.debug("Result stream closed with %d buffered results", self.qsize())
        return True

    def qsize(self) -> int:
        return self._queue.qsize()

    def __iter__(self) -> Iterator[FileResult]:
        while True:
            try:
                yield self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                # Producers are finished once closed; drain what is left
                if self._closed.is_set() and self._queue.empty():
                    return
