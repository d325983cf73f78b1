"""
walkgrep Constants Module

Centralised constants for the traversal engine and the CLI. All magic
values are defined here so the components stay free of literals.
"""

from .cli import CLICommands, CLIDefaults, CLIHelp, CLIOptions, ReportFormat
from .system import (
    Application,
    Config,
    Encoding,
    FileLimits,
    Logging,
    Pipeline,
)

__all__ = [
    "Application",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIOptions",
    "Config",
    "Encoding",
    "FileLimits",
    "Logging",
    "Pipeline",
    "ReportFormat",
]
