"""
System Configuration Constants

This module contains the constants that shape the traversal engine:
queue capacities, worker pool sizing, polling intervals and the limits
applied while reading files.
"""

from __future__ import annotations

# =============================================================================
# APPLICATION
# =============================================================================


class Application:
    """Application identity constants."""

    NAME = "walkgrep"
    VERSION = "0.1.0"
    DESCRIPTION = "Concurrent recursive text search with context windows"


# =============================================================================
# PIPELINE CONFIGURATION
# =============================================================================


class Pipeline:
    """Pipeline configuration constants."""

    FILE_QUEUE_SIZE = 128
    RESULT_QUEUE_SIZE = 128

    # Worker pools are sized from the CPU count with a hard floor
    MIN_WORKERS = 2
    CPU_DIVISOR = 4

    # Blocking queue operations wake up this often to observe the stop signal
    POLL_INTERVAL = 0.05

    # Upper bound for joining worker threads after the stop signal
    SHUTDOWN_TIMEOUT = 30.0


class FileLimits:
    """Limits applied while reading a single file."""

    MAX_LINE_BYTES = 64 * 1024
    # Unsigned 64-bit range; larger line numbers are reported, never wrapped
    MAX_LINE_NUMBER = 2**64 - 1
    NO_CONTEXT = 0


class Encoding:
    """Text encoding constants."""

    DEFAULT = "utf-8"


# =============================================================================
# LOGGING & CONFIG
# =============================================================================


class Logging:
    """Logging configuration constants."""

    LOGGER_NAME = "walkgrep"
    DEFAULT_LEVEL = "INFO"
    TIME_FORMAT = "[%H:%M:%S]"


class Config:
    """Configuration file constants."""

    ENV_PREFIX = "WALKGREP_"
    ENV_NESTED_DELIMITER = "__"
    DEFAULT_FILE_NAME = "walkgrep.toml"
    DEFAULT_DIRECTORY = "config"
