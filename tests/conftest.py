"""
Pytest configuration and shared fixtures for walkgrep tests.

This module provides common fixtures and configuration that can be used
across all test modules in the project.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from walkgrep.cli.common.context import clear_cli_context
from walkgrep.config import SearchSettings
from walkgrep.shared.constants import Logging


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as temp_path:
        # Resolved so results compare equal to os.path.abspath() output
        yield Path(temp_path).resolve()


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes a file below temp_dir.

    Text is written as UTF-8 bytes without newline translation.
    """

    def _write(relative: str, content: str | bytes) -> Path:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def fast_settings() -> SearchSettings:
    """Small pools and a short poll interval keep thread tests quick."""
    return SearchSettings(num_workers=2, poll_interval=0.01, shutdown_timeout=5.0)


@pytest.fixture(autouse=True)
def reset_walkgrep_logger() -> Generator[None, None, None]:
    """Undo logger configuration done by the CLI callback."""
    yield
    logger = logging.getLogger(Logging.LOGGER_NAME)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    clear_cli_context()
