"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from binder_engine.core.config import clear_settings_cache
from binder_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    record_context,
)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Undo global logging configuration after the test."""
    yield
    clear_context()
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str], restore_logging: None) -> None:
        """Test JSON lines carry the event, level, app tag and bound context."""
        configure_logging(level="DEBUG", json_format=True)
        bind_context(record_id="grimm")

        get_logger("binder_engine.test").info("Migrating legacy character", name="Old Grimm")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "Migrating legacy character"
        assert event["name"] == "Old Grimm"
        assert event["level"] == "info"
        assert event["app"] == "binder_engine"
        assert event["record_id"] == "grimm"

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str], restore_logging: None) -> None:
        configure_logging(level="WARNING", json_format=True)

        logger = get_logger("binder_engine.test")
        logger.info("quiet")
        logger.warning("Migration write-back failed")

        out = capsys.readouterr().out
        assert "quiet" not in out
        assert "Migration write-back failed" in out

    def test_clear_context(self, capsys: pytest.CaptureFixture[str], restore_logging: None) -> None:
        configure_logging(json_format=True)
        bind_context(record_id="grimm")
        clear_context()

        get_logger("binder_engine.test").info("Character saved")

        event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert "record_id" not in event


class TestRecordContext:
    """Tests for record_context()."""

    def test_scoped_to_block(self, capsys: pytest.CaptureFixture[str], restore_logging: None) -> None:
        configure_logging(json_format=True)
        bind_context(session="import")
        logger = get_logger("binder_engine.test")

        with record_context("grimm"):
            logger.info("Migrating legacy character")
        logger.info("Character saved")

        inside, outside = (json.loads(line) for line in capsys.readouterr().out.strip().splitlines()[-2:])
        assert inside["record_id"] == "grimm"
        assert "record_id" not in outside
        assert outside["session"] == "import"

    def test_defaults_from_settings(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch, restore_logging: None
    ) -> None:
        """Test level and format come from BINDER_ settings when not passed."""
        monkeypatch.setenv("BINDER_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("BINDER_JSON_LOGS", "true")
        clear_settings_cache()

        configure_logging()
        logger = get_logger("binder_engine.test")
        logger.warning("hidden")
        logger.error("Reference catalog unreadable")

        lines = capsys.readouterr().out.strip().splitlines()
        assert json.loads(lines[-1])["event"] == "Reference catalog unreadable"
        assert not any("hidden" in line for line in lines)
