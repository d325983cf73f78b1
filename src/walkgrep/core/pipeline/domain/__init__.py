"""Pipeline domain logic package.

This package contains domain-specific logic for the pipeline:
- coordinator: in-flight tracking, deduplication and error slots
- lifecycle: Component startup and shutdown
- orchestrator: start(), SearchRun and run_search()
- statistics: Statistics formatting
"""

from __future__ import annotations

from walkgrep.core.pipeline.domain.coordinator import Coordinator, ErrorSlot, VisitedSet
from walkgrep.core.pipeline.domain.lifecycle import (
    Supervisor,
    shutdown_pipeline_components,
    start_pipeline_components,
)
from walkgrep.core.pipeline.domain.orchestrator import (
    SearchOutcome,
    SearchRun,
    compile_pattern,
    run_search,
    start,
)
from walkgrep.core.pipeline.domain.statistics import format_statistics, statistics_to_dict

__all__ = [
    "Coordinator",
    "ErrorSlot",
    "SearchOutcome",
    "SearchRun",
    "Supervisor",
    "VisitedSet",
    "compile_pattern",
    "format_statistics",
    "run_search",
    "shutdown_pipeline_components",
    "start",
    "start_pipeline_components",
    "statistics_to_dict",
]
