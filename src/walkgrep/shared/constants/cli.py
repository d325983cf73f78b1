"""
CLI Constants

Command names, option flags, help texts and exit codes used by the
Typer application.
"""

from __future__ import annotations

from .system import Application


class CLIDefaults:
    """Default values and exit codes for the CLI."""

    VERSION = Application.VERSION

    EXIT_SUCCESS = 0
    EXIT_NO_MATCH = 1
    EXIT_ERROR = 2
    EXIT_INTERRUPTED = 130


class CLICommands:
    """Command names."""

    SEARCH = "search"


class CLIOptions:
    """Option flags."""

    CONTEXT = "--context"
    CONTEXT_SHORT = "-C"
    TYPE = "--type"
    TYPE_SHORT = "-t"
    SORT = "--sort"
    WITH_FILENAME = "--with-filename"
    WITH_FILENAME_SHORT = "-H"
    FILES_WITH_MATCHES = "--files-with-matches"
    FILES_WITH_MATCHES_SHORT = "-l"
    STATS = "--stats"
    WORKERS = "--workers"
    JSON = "--json"
    CONFIG = "--config"
    LOG_FILE = "--log-file"


class CLIHelp:
    """Help texts."""

    APP_NAME = Application.NAME
    APP_DESCRIPTION = Application.DESCRIPTION
    APP_STYLE = "rich"
    VERSION_TEXT = "walkgrep v{version}"

    PATTERN_HELP = "Regular expression matched against every line (unanchored)."
    ROOTS_HELP = "Files or directories to search. Defaults to the current directory."
    CONTEXT_HELP = "Number of context lines before and after each match."
    TYPE_HELP = "Only report files with this extension. Repeatable, e.g. -t py -t .md"
    SORT_HELP = "Sort the report by file path."
    WITH_FILENAME_HELP = "Prefix every reported line with its file path."
    FILES_WITH_MATCHES_HELP = "Only print the paths of files with matches."
    STATS_HELP = "Print traversal statistics to stderr when the search finishes."
    WORKERS_HELP = "Worker threads per stage (minimum 2)."
    CONFIG_HELP = "Path to a TOML configuration file."
    LOG_FILE_HELP = "Write JSON log records to this file."


class ReportFormat:
    """Separators used in the text report."""

    MATCH_SEPARATOR = ":"
    CONTEXT_SEPARATOR = "-"
    PATH_SEPARATOR = ":"
