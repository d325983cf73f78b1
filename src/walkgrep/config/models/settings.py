"""walkgrep Settings Configuration Model.

Main Settings class that consolidates the search and logging domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from walkgrep.config.models.logging_settings import LoggingSettings
from walkgrep.config.models.search_settings import SearchSettings
from walkgrep.shared.constants import Config

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from, in increasing priority: defaults, ``WALKGREP_``
    environment variables (``WALKGREP_SEARCH__NUM_WORKERS=8``) and the
    TOML file passed to :meth:`from_toml_file`.
    """

    model_config = SettingsConfigDict(
        env_prefix=Config.ENV_PREFIX,
        env_nested_delimiter=Config.ENV_NESTED_DELIMITER,
        env_ignore_empty=True,
        extra="ignore",
    )

    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Environment variables only fill the keys the file leaves out.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)
