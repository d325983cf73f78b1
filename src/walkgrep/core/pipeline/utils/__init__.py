"""Pipeline utilities package.

This package provides core utilities for the traversal pipeline:
- BoundedQueue: Thread-safe queue with size limits for backpressure
- TraversalStatistics: Thread-safe counters for pipeline metrics
"""

from __future__ import annotations

from walkgrep.core.pipeline.utils.bounded_queue import BoundedQueue
from walkgrep.core.pipeline.utils.statistics import TraversalStatistics

__all__ = [
    "BoundedQueue",
    "TraversalStatistics",
]
