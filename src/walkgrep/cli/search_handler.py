"""Search command handler for walkgrep CLI.

Runs one search and renders its results as text or as a JSON envelope.
"""

from __future__ import annotations

import logging
from operator import attrgetter
from typing import Any

import typer
from rich.markup import escape

from walkgrep.cli.common.context import get_cli_context
from walkgrep.cli.common.error_handler import error_console
from walkgrep.cli.common.models import SearchOptions
from walkgrep.cli.json_formatter import format_json_output, write_json_output
from walkgrep.cli.report import ReportMode, filter_results, render_result
from walkgrep.config import get_config
from walkgrep.core.models import FileResult
from walkgrep.core.pipeline import SearchRun, start
from walkgrep.core.pipeline.domain.statistics import (
    format_statistics,
    statistics_to_dict,
)
from walkgrep.shared.constants import CLICommands, CLIDefaults
from walkgrep.shared.errors import ScanError

logger = logging.getLogger(__name__)


def _report_mode(options: SearchOptions) -> ReportMode:
    if options.files_with_matches:
        return ReportMode.FILES
    if options.with_filename:
        return ReportMode.INLINE
    return ReportMode.GROUPED


def _exit_code(error: ScanError | None, reported: int) -> int:
    if error is not None:
        return CLIDefaults.EXIT_ERROR
    if reported:
        return CLIDefaults.EXIT_SUCCESS
    return CLIDefaults.EXIT_NO_MATCH


def _collect_json_data(
    options: SearchOptions,
    context_size: int,
    results: list[FileResult],
    run: SearchRun,
    error: ScanError | None,
) -> dict[str, Any]:
    return {
        "pattern": options.pattern,
        "roots": options.roots,
        "context_size": context_size,
        "types": options.types,
        "file_count": len(results),
        "files": [result.to_dict() for result in results],
        "statistics": statistics_to_dict(run.statistics, run.duration),
        "error": error.to_dict() if error else None,
    }


def handle_search_command(options: SearchOptions) -> int:
    """Handle the search command.

    Args:
        options: Validated search command options

    Returns:
        Exit code: 0 when something was reported, 1 when nothing matched,
        2 when the search recorded an error.

    Raises:
        InvalidPatternError: If the pattern does not compile.
    """
    json_output = get_cli_context().is_json_output_enabled()
    settings = get_config().search
    if options.workers is not None:
        settings = settings.model_copy(update={"num_workers": options.workers})
    context_size = settings.context_size if options.context is None else options.context
    mode = _report_mode(options)

    logger.debug(
        "Searching %s for %r (context=%d, types=%s, mode=%s)",
        options.roots,
        options.pattern,
        context_size,
        options.types or "*",
        mode.value,
    )

    collected: list[FileResult] = []
    reported = 0
    with start(options.pattern, context_size, options.roots, settings=settings) as run:
        results = filter_results(run, options.types)
        if options.sort:
            results = iter(sorted(results, key=attrgetter("path")))

        for result in results:
            reported += 1
            if json_output:
                collected.append(result)
            else:
                typer.echo("\n".join(render_result(result, mode)))

        error = run.wait()

    if json_output:
        write_json_output(
            format_json_output(
                success=error is None,
                command=CLICommands.SEARCH,
                data=_collect_json_data(options, context_size, collected, run, error),
                errors=[error.message] if error is not None and error.fatal else None,
                warnings=[error.message] if error is not None and error.skippable else None,
            ),
        )
    else:
        if options.stats:
            error_console.print(
                format_statistics(run.statistics, run.duration),
                markup=False,
                highlight=False,
            )
        if error is not None:
            error_console.print(f"[red]Error:[/red] {escape(error.message)}", highlight=False)

    return _exit_code(error, reported)
