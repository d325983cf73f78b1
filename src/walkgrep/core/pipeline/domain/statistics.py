"""Search statistics formatting.

This module renders the counters collected by TraversalStatistics:
- format_statistics(): human-readable report for ``--stats``
- statistics_to_dict(): flat dictionary for JSON output
"""

from __future__ import annotations

from typing import Any

from walkgrep.core.pipeline.utils import TraversalStatistics


def statistics_to_dict(stats: TraversalStatistics, total_duration: float) -> dict[str, Any]:
    """Export the counters together with the run duration."""
    data = stats.snapshot()
    data["duration_seconds"] = round(total_duration, 6)
    return data


def format_statistics(stats: TraversalStatistics, total_duration: float) -> str:
    """Format search statistics into a human-readable report.

    Args:
        stats: TraversalStatistics instance of a finished run.
        total_duration: Wall-clock duration of the run in seconds.

    Returns:
        A formatted multi-line string containing all statistics.
    """
    snapshot = stats.snapshot()
    scanned = snapshot["files_scanned"]
    match_rate = (snapshot["files_matched"] / scanned * 100) if scanned > 0 else 0

    lines = [
        "",
        "=" * 60,
        "                    SEARCH STATISTICS",
        "=" * 60,
        "",
        "Timing:",
        f"  - Total search time:    {total_duration:.2f}s",
        "",
        "Traversal:",
        f"  - Directories listed:   {snapshot['directories_listed']:,}",
        f"  - Files queued:         {snapshot['files_queued']:,}",
        f"  - Duplicates skipped:   {snapshot['duplicates_skipped']:,}",
        "",
        "Scanner:",
        f"  - Files scanned:        {scanned:,}",
        f"  - Files matched:        {snapshot['files_matched']:,} ({match_rate:.2f}%)",
        "",
        "Errors:",
        f"  - Skipped:              {snapshot['skippable_errors']:,}",
        f"  - Fatal:                {snapshot['fatal_errors']:,}",
        "",
        "=" * 60,
        "",
    ]

    return "\n".join(lines)
