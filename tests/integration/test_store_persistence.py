"""Integration tests for the character store.

Covers the load/save contract: loading migrates legacy data and writes it
back once, saving never migrates, and a failed write-back degrades to a
warning instead of failing the load.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

import pytest

from binder_engine.core.exceptions import MigrationError, PersistenceError
from binder_engine.models.character import Character
from binder_engine.storage.database import WRITEBACK_FAILED_WARNING, CharacterStore


@pytest.fixture
def store(tmp_path: Path) -> CharacterStore:
    """Create a store on a temporary database."""
    return CharacterStore(tmp_path / "characters.db", retry_wait=0)


class TestSaveAndLoad:
    """Tests for the basic round trip."""

    def test_round_trip(self, store: CharacterStore, sample_record: dict[str, Any]) -> None:
        store.save_record("aldric", sample_record)

        result = store.load_record("aldric")

        assert result is not None
        assert result.record == sample_record
        assert not result.migrated
        assert result.warnings == []
        assert result.character.name == "Aldric Stone"

    def test_save_typed_record(self, store: CharacterStore, sample_character: Character) -> None:
        store.save_record("aldric", sample_character)

        assert store.load_raw("aldric") == sample_character.to_record()

    def test_missing_record(self, store: CharacterStore) -> None:
        assert store.load_record("nobody") is None
        assert store.load_raw("nobody") is None

    def test_default_path_from_settings(self, isolated_database_path: Path) -> None:
        store = CharacterStore()

        assert store.db_path == isolated_database_path
        assert isolated_database_path.exists()

    def test_list_and_delete(self, store: CharacterStore, sample_record: dict[str, Any]) -> None:
        store.save_record("a", sample_record)
        store.save_record("b", sample_record)

        assert set(store.list_ids()) == {"a", "b"}
        assert store.delete_record("a")
        assert not store.delete_record("a")
        assert store.list_ids() == ["b"]


class TestMigrationOnLoad:
    """Tests for migrating legacy records at the load boundary."""

    def test_save_never_migrates(self, store: CharacterStore, legacy_record: dict[str, Any]) -> None:
        store.save_record("grimm", legacy_record)

        assert store.load_raw("grimm") == legacy_record

    def test_legacy_load_migrates_and_writes_back(
        self, store: CharacterStore, legacy_record: dict[str, Any]
    ) -> None:
        store.save_record("grimm", legacy_record)

        result = store.load_record("grimm")

        assert result is not None
        assert result.migrated
        assert result.warnings == []
        assert result.record["settings"]["version"] == 2
        assert result.record["currency"]["silver"] == 25
        assert store.load_raw("grimm") == result.record

    def test_second_load_does_not_migrate(
        self, store: CharacterStore, legacy_record: dict[str, Any]
    ) -> None:
        store.save_record("grimm", legacy_record)
        first = store.load_record("grimm")

        second = store.load_record("grimm")

        assert first is not None and second is not None
        assert not second.migrated
        assert second.record == first.record

    def test_unversioned_record_stamped(self, store: CharacterStore, sample_record: dict[str, Any]) -> None:
        del sample_record["settings"]
        store.save_record("aldric", sample_record)

        result = store.load_record("aldric")

        assert result is not None
        assert result.migrated
        assert store.load_raw("aldric")["settings"] == {"version": 2}

    def test_writeback_failure_returns_record_with_warning(
        self,
        store: CharacterStore,
        legacy_record: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a locked database still yields the migrated record."""
        store.save_record("grimm", legacy_record)
        attempts: list[str] = []

        def locked(record_id: str, record: dict[str, Any]) -> None:
            attempts.append(record_id)
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(store, "_write_record", locked)

        result = store.load_record("grimm")

        assert result is not None
        assert result.migrated
        assert result.record["settings"]["version"] == 2
        assert result.warnings == [WRITEBACK_FAILED_WARNING]
        assert len(attempts) == store.writeback_attempts

        assert CharacterStore(store.db_path).load_raw("grimm") == legacy_record

    def test_not_a_record(self, store: CharacterStore) -> None:
        store.save_record("junk", {"settings": {"version": 7}})

        with pytest.raises(MigrationError):
            store.load_record("junk")


class TestStoreErrors:
    """Tests for unreadable stored data."""

    def test_corrupt_json(self, store: CharacterStore) -> None:
        with sqlite3.connect(store.db_path) as conn:
            conn.execute(
                "INSERT INTO characters (id, name, record_json, updated_at) VALUES (?, ?, ?, ?)",
                ("bad", "Bad", "{not json", "2024-01-01T00:00:00"),
            )

        with pytest.raises(PersistenceError) as exc_info:
            store.load_record("bad")

        assert exc_info.value.details["record_id"] == "bad"
