"""
Reusable Typer Options Module

This module centralizes the definitions of the global options shared by
the main callback.

The options include:
- verbose: Verbosity level (count-based)
- log_level: Logging level (enum-based)
- json_output: JSON output mode (flag-based)
- config / log_file: configuration and log file paths
- version: print the version and exit
"""

from __future__ import annotations

import typer

from walkgrep.shared.constants import CLIDefaults, CLIHelp, CLIOptions

# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)


# Log level option - enum-based with case-insensitive choices
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). "
    "Default: the configured level.",
)


# JSON output option - flag-based
json_output_option = typer.Option(
    CLIOptions.JSON,
    help="Enable machine-readable JSON output instead of the text report.",
)


config_option = typer.Option(
    CLIOptions.CONFIG,
    help=CLIHelp.CONFIG_HELP,
    exists=True,
    file_okay=True,
    dir_okay=False,
)


log_file_option = typer.Option(
    CLIOptions.LOG_FILE,
    help=CLIHelp.LOG_FILE_HELP,
    dir_okay=False,
)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit


# Version option - for main app only, handled before any command runs
version_option = typer.Option(
    "--version",
    "-V",
    callback=version_callback,
    help="Show version information and exit.",
    is_eager=True,
)
