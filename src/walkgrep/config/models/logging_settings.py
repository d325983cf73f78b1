"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from walkgrep.shared.constants import Logging

_VALID_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages the level of the ``walkgrep`` logger, the optional
    JSON log file and whether console logs are rendered by rich.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")
    rich_console: bool = Field(
        default=True,
        description="Render console logs with rich instead of JSON lines",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _VALID_LEVELS:
            msg = f"Invalid log level: {value}. Must be one of {sorted(_VALID_LEVELS)}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
