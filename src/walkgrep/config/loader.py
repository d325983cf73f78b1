"""Settings loader and singleton manager.

This module handles:
- Configuration file loading from TOML
- Thread-safe singleton pattern for Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from pydantic import ValidationError

from walkgrep.config.models.settings import Settings
from walkgrep.shared.constants import Config
from walkgrep.shared.errors import create_config_error

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Locations searched when no configuration file is given."""
    return [
        Path(Config.DEFAULT_FILE_NAME),
        Path(Config.DEFAULT_DIRECTORY) / Config.DEFAULT_FILE_NAME,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries to load
                    from default locations or environment variables.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ApplicationError: If the explicit file is missing, is not valid TOML
            or holds invalid values.
    """
    try:
        if config_path:
            return Settings.from_toml_file(config_path)

        for candidate in default_config_paths():
            if candidate.exists():
                return Settings.from_toml_file(candidate)

        # Fall back to environment variables and defaults
        return Settings()
    except FileNotFoundError as e:
        raise create_config_error(
            f"Configuration file not found: {config_path}",
            config_key="config_path",
            operation="load_settings",
            original_error=e,
        ) from e
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration: {e.error_count()} validation error(s): {e}",
            operation="load_settings",
            original_error=e,
        ) from e
    except (toml.TomlDecodeError, OSError) as e:
        raise create_config_error(
            f"Failed to read configuration: {e}",
            operation="load_settings",
            original_error=e,
        ) from e


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance.

    Args:
        config_path: Optional TOML file replacing the default lookup.

    Raises:
        ApplicationError: If the configuration cannot be loaded.
    """
    return _loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "default_config_paths",
    "get_config",
    "load_settings",
    "reload_config",
]
