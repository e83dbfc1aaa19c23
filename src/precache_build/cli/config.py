"""CLI configuration using Pydantic settings.

Configuration is loaded from:
1. Environment variables (PRECACHE_* prefix)
2. .env file in current directory
3. Default values
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}


class PrecacheSettings(BaseSettings):
    """Settings for the precache-build CLI.

    Environment variables are prefixed with PRECACHE_.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRECACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_file: Path = Path("precache-config.json")
    log_level: str = "WARNING"
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        upper = v.upper()
        if upper not in LOG_LEVELS:
            msg = f"Invalid log level: {v}. Must be one of {sorted(LOG_LEVELS)}"
            raise ValueError(msg)
        return upper

    @property
    def log_level_number(self) -> int:
        return 10 if self.debug else LOG_LEVELS[self.log_level]


@lru_cache
def get_settings() -> PrecacheSettings:
    """Get the CLI settings.

    Settings are cached after first load.
    """
    return PrecacheSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (for testing)."""
    get_settings.cache_clear()
