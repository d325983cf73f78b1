"""Configuration domain models."""

from __future__ import annotations

from .logging_settings import LoggingSettings
from .search_settings import SearchSettings, default_worker_count
from .settings import Settings

__all__ = [
    "LoggingSettings",
    "SearchSettings",
    "Settings",
    "default_worker_count",
]
