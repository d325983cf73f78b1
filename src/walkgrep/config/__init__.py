"""walkgrep Configuration Module

This module provides access to the configuration models and the settings
loader:
- Settings: Main configuration facade
- SearchSettings, LoggingSettings: Domain models
- Loader functions: get_config, load_settings, reload_config
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import LoggingSettings, SearchSettings, Settings, default_worker_count

__all__ = [
    "LoggingSettings",
    "SearchSettings",
    "Settings",
    "default_worker_count",
    "get_config",
    "load_settings",
    "reload_config",
]
