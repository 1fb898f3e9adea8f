"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from binder_engine.core.config import (
    ReferenceSettings,
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from binder_engine.core.exceptions import ConfigurationError


class TestRulesSettings:
    """Tests for RulesSettings configuration."""

    def test_default_values(self) -> None:
        """Test default progression rules."""
        settings = RulesSettings()

        assert settings.fixed_hp_level_threshold == 9
        assert settings.max_character_level == 20

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test rules read from the environment."""
        monkeypatch.setenv("BINDER_RULES_FIXED_HP_LEVEL_THRESHOLD", "10")

        settings = RulesSettings()

        assert settings.fixed_hp_level_threshold == 10

    def test_threshold_above_cap_rejected(self) -> None:
        """Test that the fixed tier must start at or below the level cap."""
        with pytest.raises(ConfigurationError) as exc_info:
            RulesSettings(fixed_hp_level_threshold=15, max_character_level=12)

        assert "fixed_hp_level_threshold" in str(exc_info.value)


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_loading_does_not_touch_disk(self, tmp_path: Path) -> None:
        """Test that settings never create the database directory."""
        db_path = tmp_path / "nested" / "store.db"

        settings = StorageSettings(database_path=db_path)

        assert settings.database_path == db_path
        assert not db_path.parent.exists()

    def test_writeback_attempts_bounds(self) -> None:
        """Test write-back attempts must be positive."""
        with pytest.raises(ValueError):
            StorageSettings(writeback_attempts=0)


class TestReferenceSettings:
    """Tests for ReferenceSettings configuration."""

    def test_defaults_to_bundled_catalogs(self) -> None:
        """Test that no catalog path means the bundled data."""
        assert ReferenceSettings().catalog_path is None

    def test_missing_directory_rejected(self, tmp_path: Path) -> None:
        """Test that a configured catalog path must exist."""
        with pytest.raises(ConfigurationError):
            ReferenceSettings(catalog_path=tmp_path / "missing")


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self) -> None:
        """Test default settings initialization."""
        settings = Settings()

        assert settings.log_level == "INFO"
        assert isinstance(settings.rules, RulesSettings)

    def test_database_path_from_env(self, isolated_database_path: Path) -> None:
        """Test nested storage settings pick up their own env prefix."""
        settings = Settings()

        assert settings.storage.database_path == isolated_database_path


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_caching(self) -> None:
        """Test that settings are cached."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_cache_clear(self) -> None:
        """Test that cache can be cleared."""
        settings1 = get_settings()
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_invalid_env_raises_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that unparseable configuration surfaces as ConfigurationError."""
        monkeypatch.setenv("BINDER_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            get_settings()
