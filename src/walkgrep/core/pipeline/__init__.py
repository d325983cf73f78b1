"""Concurrent traversal pipeline for walkgrep.

Recommended imports:
    from walkgrep.core.pipeline import start, run_search
    from walkgrep.core.pipeline.components import ContextExtractor
"""

from walkgrep.core.pipeline.domain.orchestrator import (
    SearchOutcome,
    SearchRun,
    run_search,
    start,
)

__all__ = ["SearchOutcome", "SearchRun", "run_search", "start"]
