"""walkgrep Error Handling Module

This module defines the error handling system for walkgrep, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Skippable vs. fatal: ScanError knows whether a traversal may continue
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for walkgrep.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # File System Errors (skippable during a traversal)
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    DIRECTORY_NOT_FOUND = "DIRECTORY_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_PATH = "INVALID_PATH"

    # Content Errors (skippable during a traversal)
    INVALID_ENCODING = "INVALID_ENCODING"
    LINE_TOO_LONG = "LINE_TOO_LONG"

    # Unexpected failures (fatal for a traversal)
    FILE_READ_ERROR = "FILE_READ_ERROR"
    DIRECTORY_LIST_ERROR = "DIRECTORY_LIST_ERROR"
    TOO_MANY_LINES = "TOO_MANY_LINES"
    SCANNER_ERROR = "SCANNER_ERROR"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    INVALID_PATTERN = "INVALID_PATTERN"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Pipeline Errors
    PIPELINE_EXECUTION_ERROR = "PIPELINE_EXECUTION_ERROR"
    PIPELINE_SHUTDOWN_ERROR = "PIPELINE_SHUTDOWN_ERROR"

    # CLI Errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_OUTPUT_ERROR = "CLI_OUTPUT_ERROR"


# Codes a traversal records and then steps over
SKIPPABLE_CODES: frozenset[ErrorCode] = frozenset(
    {
        ErrorCode.FILE_NOT_FOUND,
        ErrorCode.DIRECTORY_NOT_FOUND,
        ErrorCode.PERMISSION_DENIED,
        ErrorCode.INVALID_PATH,
        ErrorCode.INVALID_ENCODING,
        ErrorCode.LINE_TOO_LONG,
    },
)


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to keep log records serialisable.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict for logging.

        Returns:
            Dictionary with the populated fields and a guaranteed
            additional_data key.
        """
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = self.additional_data or {}
        return data


class WalkgrepError(Exception):
    """Base exception class for all walkgrep errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize WalkgrepError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(WalkgrepError):
    """Domain-specific errors (invalid input to the search itself)."""


class InfrastructureError(WalkgrepError):
    """Errors raised while talking to the file system or running the pipeline."""


class ApplicationError(WalkgrepError):
    """Application-level errors such as configuration problems."""


class InvalidPatternError(ApplicationError):
    """The search pattern does not compile.

    Raised synchronously by ``start()`` before any worker thread exists.
    """

    def __init__(
        self,
        pattern: str,
        original_error: Exception | None = None,
    ) -> None:
        self.pattern = pattern
        super().__init__(
            ErrorCode.INVALID_PATTERN,
            f"Invalid search pattern {pattern!r}: {original_error}",
            ErrorContext(
                operation="compile_pattern",
                additional_data={"pattern": pattern},
            ),
            original_error,
        )


class ScanError(InfrastructureError):
    """An error recorded during a traversal, bound to the path that caused it.

    Whether the traversal may continue is decided by the error code unless
    the caller overrides it explicitly.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        path: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        *,
        skippable: bool | None = None,
    ) -> None:
        self.path = path
        self._skippable = code in SKIPPABLE_CODES if skippable is None else skippable
        super().__init__(
            code,
            message,
            context or ErrorContext(file_path=path),
            original_error,
        )

    @property
    def skippable(self) -> bool:
        """True when the traversal may continue after this error."""
        return self._skippable

    @property
    def fatal(self) -> bool:
        """True when this error terminates the traversal."""
        return not self._skippable

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["path"] = self.path
        data["skippable"] = self._skippable
        return data


class CliError(ApplicationError):
    """CLI-specific error with an exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 2,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def classify_os_error(error: BaseException, *, directory: bool = False) -> ErrorCode:
    """Map an exception raised by a file system call to an ErrorCode.

    Args:
        error: The exception raised by open/read/scandir/stat.
        directory: Whether the failing call was listing a directory.

    Returns:
        The matching ErrorCode. Not-found and permission conditions map
        to skippable codes, anything else to a fatal one.
    """
    if isinstance(error, UnicodeDecodeError):
        return ErrorCode.INVALID_ENCODING
    if isinstance(error, PermissionError):
        return ErrorCode.PERMISSION_DENIED
    if isinstance(error, FileNotFoundError):
        return ErrorCode.DIRECTORY_NOT_FOUND if directory else ErrorCode.FILE_NOT_FOUND
    if directory and isinstance(error, NotADirectoryError):
        # Replaced by a file between discovery and listing
        return ErrorCode.DIRECTORY_NOT_FOUND
    if isinstance(error, ValueError):
        # e.g. an embedded NUL byte in a root path
        return ErrorCode.INVALID_PATH
    return ErrorCode.DIRECTORY_LIST_ERROR if directory else ErrorCode.FILE_READ_ERROR


def create_scan_error(
    path: str,
    error: BaseException,
    operation: str,
    *,
    directory: bool = False,
    skippable: bool | None = None,
) -> ScanError:
    """Create a ScanError for a failed file system operation."""
    code = classify_os_error(error, directory=directory)
    context = ErrorContext(
        file_path=path,
        operation=operation,
        additional_data={"error_type": type(error).__name__},
    )
    original = error if isinstance(error, Exception) else None
    return ScanError(
        code,
        f"{operation} failed for {path}: {error}",
        path,
        context,
        original,
        skippable=skippable,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 2,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return CliError(
        ErrorCode.CLI_UNEXPECTED_ERROR,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
