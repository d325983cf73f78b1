"""
CLI Error Handling Utilities

This module provides consistent error handling for CLI commands: mapping
exceptions to CliError, logging them and printing them to stderr (or as a
JSON envelope on stdout with --json).
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.markup import escape

from walkgrep.cli.json_formatter import format_error_output, write_json_output
from walkgrep.shared.constants import CLIDefaults
from walkgrep.shared.errors import (
    ApplicationError,
    CliError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_cli_error,
)

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)


def handle_cli_error(
    error: Exception | KeyboardInterrupt,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle CLI errors with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    error_context = _create_error_context(error, command, json_output=json_output)
    cli_error = _map_error_to_cli_error(error, command, error_context)
    _log_error(error, command, cli_error, error_context)
    _output_error(cli_error, error, command, error_context, json_output=json_output)

    return cli_error.exit_code


def _create_error_context(
    error: BaseException,
    command: str,
    *,
    json_output: bool,
) -> dict[str, Any]:
    """Create structured error context for logging."""
    return {
        "command": command,
        "error_type": type(error).__name__,
        "json_output": json_output,
    }


def _map_error_to_cli_error(
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
) -> CliError:
    """Map specific exception types to CLI errors."""
    if isinstance(error, CliError):
        error_context["error_code"] = error.code.value
        return error

    # Configuration problems and invalid patterns
    if isinstance(error, ApplicationError):
        error_context["error_code"] = error.code.value
        return create_cli_error(
            message=error.message,
            command=command,
            original_error=error,
            exit_code=CLIDefaults.EXIT_ERROR,
        )

    if isinstance(error, InfrastructureError):
        error_context["error_code"] = error.code.value
        return create_cli_error(
            message=f"Infrastructure error: {error.message}",
            command=command,
            original_error=error,
            exit_code=CLIDefaults.EXIT_ERROR,
        )

    if isinstance(error, OSError):
        error_context["error_category"] = "file_system"
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
            exit_code=CLIDefaults.EXIT_ERROR,
        )

    if isinstance(error, KeyboardInterrupt):
        error_context["interrupt_type"] = "user_interrupt"
        return create_cli_error(
            message="Search interrupted by user",
            command=command,
            exit_code=CLIDefaults.EXIT_INTERRUPTED,
        )

    error_context["error_category"] = "unexpected"
    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error if isinstance(error, Exception) else None,
        exit_code=CLIDefaults.EXIT_ERROR,
    )


def _log_error(
    error: BaseException,
    command: str,
    cli_error: CliError,
    error_context: dict[str, Any],
) -> None:
    """Log the error with structured context."""
    if isinstance(error, KeyboardInterrupt):
        logger.warning(
            "Command interrupted: %s",
            cli_error.message,
            extra={"context": error_context},
        )
    elif "error_category" in error_context:
        logger.exception(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
        )
    else:
        # Known walkgrep errors: the message is enough, keep tracebacks for DEBUG
        logger.debug(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
            exc_info=True,
        )


def _output_error(
    cli_error: CliError,
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
    *,
    json_output: bool,
) -> None:
    """Output error message in appropriate format."""
    if not json_output:
        error_console.print(f"[red]Error:[/red] {escape(cli_error.message)}")
        return

    try:
        write_json_output(
            format_error_output(
                command,
                [cli_error.message],
                data={
                    "error_code": cli_error.code.value,
                    "error_type": type(error).__name__,
                    "exit_code": cli_error.exit_code,
                    "context": error_context,
                },
            ),
        )
    except OSError as output_error:
        _handle_json_output_error(output_error, command, cli_error, error_context)


def _handle_json_output_error(
    output_error: Exception,
    command: str,
    cli_error: CliError,
    error_context: dict[str, Any],
) -> None:
    """Fall back to stderr when the JSON envelope cannot be written."""
    output_failure = CliError(
        ErrorCode.CLI_OUTPUT_ERROR,
        f"Failed to write JSON output: {output_error}",
        ErrorContext(operation="write_json_output", additional_data={"command": command}),
        original_error=output_error,
        command=command,
    )
    logger.exception(
        "JSON output error: %s",
        output_failure.message,
        extra={"context": error_context},
    )
    error_console.print(f"[red]Error:[/red] {escape(cli_error.message)}")
    error_console.print(f"[red]JSON output failed:[/red] {escape(output_failure.message)}")
