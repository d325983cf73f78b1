"""Tests for the settings models and the settings loader."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from walkgrep.config import (
    LoggingSettings,
    SearchSettings,
    Settings,
    default_worker_count,
    load_settings,
    reload_config,
)
from walkgrep.config.loader import SettingsLoader
from walkgrep.shared.errors import ApplicationError, ErrorCode


@pytest.fixture
def isolated_cwd(temp_dir, monkeypatch):
    """Run without any walkgrep.toml or WALKGREP_ variable in reach."""
    monkeypatch.chdir(temp_dir)
    for name in ("WALKGREP_SEARCH__NUM_WORKERS", "WALKGREP_SEARCH__CONTEXT_SIZE", "WALKGREP_LOGGING__LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return temp_dir


class TestSearchSettings:
    """Test cases for SearchSettings."""

    def test_defaults(self) -> None:
        settings = SearchSettings()

        assert settings.context_size == 0
        assert settings.num_workers == default_worker_count()
        assert settings.num_workers >= 2
        assert settings.encoding == "utf-8"

    def test_worker_minimum(self) -> None:
        with pytest.raises(ValidationError):
            SearchSettings(num_workers=1)

    def test_negative_context_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SearchSettings(context_size=-1)

    def test_queue_sizes_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SearchSettings(file_queue_size=0)


class TestLoggingSettings:
    """Test cases for LoggingSettings."""

    def test_level_is_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_unknown_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")


class TestLoadSettings:
    """Test cases for load_settings()."""

    def test_defaults_without_file(self, isolated_cwd) -> None:
        settings = load_settings()

        assert settings.search == SearchSettings()
        assert settings.logging.level == "INFO"

    def test_environment_override(self, isolated_cwd, monkeypatch) -> None:
        monkeypatch.setenv("WALKGREP_SEARCH__NUM_WORKERS", "6")

        assert load_settings().search.num_workers == 6

    def test_default_file_in_working_directory(self, isolated_cwd, write_file) -> None:
        write_file("walkgrep.toml", "[search]\ncontext_size = 3\n")

        assert load_settings().search.context_size == 3

    def test_default_file_in_config_directory(self, isolated_cwd, write_file) -> None:
        write_file("config/walkgrep.toml", '[logging]\nlevel = "warning"\n')

        assert load_settings().logging.level == "WARNING"

    def test_explicit_file_wins_over_environment(self, isolated_cwd, write_file, monkeypatch) -> None:
        # Given
        path = write_file("custom.toml", "[search]\nnum_workers = 3\n")
        monkeypatch.setenv("WALKGREP_SEARCH__NUM_WORKERS", "6")
        monkeypatch.setenv("WALKGREP_SEARCH__CONTEXT_SIZE", "2")

        # When
        settings = load_settings(path)

        # Then: the file wins, the environment fills what the file omits
        assert settings.search.num_workers == 3
        assert settings.search.context_size == 2

    def test_missing_explicit_file(self, isolated_cwd) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            load_settings("nope.toml")

        assert exc_info.value.code == ErrorCode.CONFIG_ERROR
        assert isinstance(exc_info.value.original_error, FileNotFoundError)

    def test_invalid_value(self, isolated_cwd, write_file) -> None:
        path = write_file("bad.toml", "[search]\ncontext_size = -4\n")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(path)

        assert "Invalid configuration" in exc_info.value.message

    def test_malformed_toml(self, isolated_cwd, write_file) -> None:
        path = write_file("broken.toml", "[search\n")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(path)

        assert "Failed to read configuration" in exc_info.value.message

    def test_unknown_keys_are_ignored(self, isolated_cwd, write_file) -> None:
        path = write_file("extra.toml", "[search]\ncontext_size = 1\n\n[display]\ncolor = true\n")

        assert load_settings(path).search.context_size == 1


class TestSettingsLoader:
    """Test cases for the settings singleton."""

    def test_get_config_is_cached(self, isolated_cwd) -> None:
        loader = SettingsLoader()

        assert loader.get_config() is loader.get_config()

    def test_reload_replaces_instance(self, isolated_cwd, write_file) -> None:
        path = write_file("custom.toml", "[search]\ncontext_size = 5\n")

        settings = reload_config(path)

        assert isinstance(settings, Settings)
        assert settings.search.context_size == 5
        reload_config()
