"""
walkgrep Typer CLI Application

This is the main Typer-based CLI application for walkgrep. The main
callback loads the configuration and sets up logging; the ``search``
command runs the traversal engine and prints its report.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from walkgrep.cli.common.context import (
    CliContext,
    LogLevel,
    get_cli_context,
    set_cli_context,
)
from walkgrep.cli.common.error_handler import handle_cli_error
from walkgrep.cli.common.models import SearchOptions
from walkgrep.cli.common.options import (
    config_option,
    json_output_option,
    log_file_option,
    log_level_option,
    verbose_option,
    version_option,
)
from walkgrep.cli.search_handler import handle_search_command
from walkgrep.config import reload_config
from walkgrep.shared.constants import (
    CLICommands,
    CLIDefaults,
    CLIHelp,
    CLIOptions,
    Pipeline,
)
from walkgrep.shared.logging import setup_structured_logger

# Version information
__version__ = CLIDefaults.VERSION


def main_callback(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    verbose: int,
    log_level: LogLevel | None,
    json_output: bool,
    config: Path | None,
    log_file: Path | None,
) -> None:
    """
    Process the global options.

    Sets the CLI context, loads the configuration (explicit file, default
    locations, environment) and configures the ``walkgrep`` logger.

    Raises:
        ApplicationError: If the configuration cannot be loaded.
    """
    context = CliContext(
        verbose=verbose,
        log_level=log_level,
        json_output=json_output,
        config_path=str(config) if config else None,
        log_file=str(log_file) if log_file else None,
    )
    set_cli_context(context)

    settings = reload_config(context.config_path)
    setup_structured_logger(
        level=context.get_effective_log_level(settings.logging.level),
        log_file=context.log_file or settings.logging.file,
        use_rich_console=settings.logging.rich_console,
    )


# Create the main Typer app with callback
app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel | None, log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    config: Annotated[Path | None, config_option] = None,
    log_file: Annotated[Path | None, log_file_option] = None,
    version: Annotated[bool, version_option] = False,  # noqa: ARG001
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, json_output, config, log_file)
    except typer.Exit:
        raise
    except Exception as e:  # pylint: disable=broad-exception-caught
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


@app.command(CLICommands.SEARCH)
def search_command_typer(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    pattern: str = typer.Argument(..., help=CLIHelp.PATTERN_HELP),
    roots: list[str] | None = typer.Argument(None, help=CLIHelp.ROOTS_HELP),
    context: int | None = typer.Option(
        None,
        CLIOptions.CONTEXT,
        CLIOptions.CONTEXT_SHORT,
        min=0,
        help=CLIHelp.CONTEXT_HELP,
    ),
    types: list[str] | None = typer.Option(
        None,
        CLIOptions.TYPE,
        CLIOptions.TYPE_SHORT,
        help=CLIHelp.TYPE_HELP,
    ),
    sort: bool = typer.Option(False, CLIOptions.SORT, help=CLIHelp.SORT_HELP),
    with_filename: bool = typer.Option(
        False,
        CLIOptions.WITH_FILENAME,
        CLIOptions.WITH_FILENAME_SHORT,
        help=CLIHelp.WITH_FILENAME_HELP,
    ),
    files_with_matches: bool = typer.Option(
        False,
        CLIOptions.FILES_WITH_MATCHES,
        CLIOptions.FILES_WITH_MATCHES_SHORT,
        help=CLIHelp.FILES_WITH_MATCHES_HELP,
    ),
    stats: bool = typer.Option(False, CLIOptions.STATS, help=CLIHelp.STATS_HELP),
    workers: int | None = typer.Option(
        None,
        CLIOptions.WORKERS,
        min=Pipeline.MIN_WORKERS,
        help=CLIHelp.WORKERS_HELP,
    ),
) -> None:
    """
    Search ROOTS recursively for lines matching PATTERN.

    Directories are traversed concurrently; every regular file is read as
    UTF-8 and each matching line is printed with up to --context lines
    around it. Symbolic links inside directories are not followed.

    Exit status is 0 if something was reported, 1 if nothing matched and
    2 if an error was recorded.

    Examples:
        # Search the current directory
        walkgrep search "TODO"

        # Two lines of context, Python files only, sorted by path
        walkgrep search "def \\w+_handler" src tests -C 2 -t py --sort

        # Only list the matching files
        walkgrep search -l "import typer" .
    """
    json_output = get_cli_context().is_json_output_enabled()
    try:
        options = SearchOptions(
            pattern=pattern,
            roots=roots or ["."],
            context=context,
            types=types or [],
            sort=sort,
            with_filename=with_filename,
            files_with_matches=files_with_matches,
            stats=stats,
            workers=workers,
        )
        exit_code = handle_search_command(options)
    except (Exception, KeyboardInterrupt) as e:  # pylint: disable=broad-exception-caught
        exit_code = handle_cli_error(e, CLICommands.SEARCH, json_output=json_output)

    raise typer.Exit(exit_code)
