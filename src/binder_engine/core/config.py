"""Configuration management for the binder rules engine.

Centralized configuration using pydantic-settings, read from environment
variables and an optional .env file.

Example:
    >>> from binder_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.fixed_hp_level_threshold
    9

Environment Variables:
    BINDER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    BINDER_RULES_FIXED_HP_LEVEL_THRESHOLD: Level at which HP gain becomes fixed
    BINDER_RULES_MAX_CHARACTER_LEVEL: Highest attainable character level
    BINDER_STORAGE_DATABASE_PATH: Path to the SQLite character database
    BINDER_REFERENCE_CATALOG_PATH: Directory holding races/classes/spells JSON
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from binder_engine.core.constants import (
    FIXED_HP_LEVEL_THRESHOLD,
    MAX_CHARACTER_LEVEL,
)
from binder_engine.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Tunable progression rules.

    Attributes:
        fixed_hp_level_threshold: Level from which HP gain is a flat amount.
        max_character_level: Highest level a character may reach.
    """

    model_config = SettingsConfigDict(
        env_prefix="BINDER_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fixed_hp_level_threshold: int = Field(
        default=FIXED_HP_LEVEL_THRESHOLD,
        ge=2,
        description="Level at which hit point gain stops being rolled",
    )
    max_character_level: int = Field(
        default=MAX_CHARACTER_LEVEL,
        ge=1,
        le=40,
        description="Highest attainable character level",
    )

    @model_validator(mode="after")
    def validate_threshold_below_cap(self) -> "RulesSettings":
        """Ensure the fixed-gain tier starts at or below the level cap.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the threshold exceeds the level cap.
        """
        if self.fixed_hp_level_threshold > self.max_character_level:
            raise ConfigurationError(
                f"fixed_hp_level_threshold ({self.fixed_hp_level_threshold}) must not "
                f"exceed max_character_level ({self.max_character_level})",
                config_key="fixed_hp_level_threshold",
            )
        return self


class StorageSettings(BaseSettings):
    """Configuration for the character store.

    Attributes:
        database_path: Path to the SQLite database file.
        writeback_attempts: Attempts to persist a migrated record on load.
    """

    model_config = SettingsConfigDict(
        env_prefix="BINDER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/binder.db"),
        description="Path to SQLite database",
    )
    writeback_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts to persist a migrated record before giving up",
    )


class ReferenceSettings(BaseSettings):
    """Configuration for the race/class/spell catalogs.

    Attributes:
        catalog_path: Directory with races.json, classes.json, spells.json.
            None uses the catalogs bundled with the package.
    """

    model_config = SettingsConfigDict(
        env_prefix="BINDER_REFERENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    catalog_path: Path | None = Field(
        default=None,
        description="Directory containing reference catalogs",
    )

    @field_validator("catalog_path", mode="after")
    @classmethod
    def ensure_catalog_directory(cls, value: Path | None) -> Path | None:
        """Reject a configured catalog path that is not a directory.

        Raises:
            ConfigurationError: If the path does not exist.
        """
        if value is not None and not value.is_dir():
            raise ConfigurationError(
                f"Reference catalog directory not found: {value}",
                config_key="catalog_path",
            )
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        rules: Progression rules.
        storage: Character store settings.
        reference: Reference catalog settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="BINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    reference: ReferenceSettings = Field(default_factory=ReferenceSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "StorageSettings",
    "ReferenceSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
