"""SQLite persistence for character records.

Loading runs the migration engine before a record is returned; saving
never does. When a load migrates a record, the migrated form is written
back so the migration runs once. A failed write-back does not fail the
load: the caller gets the migrated in-memory record plus a warning, and
the migration is attempted again on the next load.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from binder_engine.core.config import get_settings
from binder_engine.core.exceptions import PersistenceError
from binder_engine.core.logging import get_logger, record_context
from binder_engine.migration.transform import process_character_data
from binder_engine.models.character import Character


logger = get_logger(__name__)

WRITEBACK_FAILED_WARNING = (
    "Character data was upgraded but could not be saved; the upgrade will be retried on next load."
)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class LoadResult:
    """A record read from the store.

    Attributes:
        record_id: Store key.
        record: Current-schema record (wire dict).
        migrated: True if the stored data was in an older schema.
        warnings: Non-fatal problems, e.g. a failed migration write-back.
    """

    record_id: str
    record: dict[str, Any]
    migrated: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def character(self) -> Character:
        """The record parsed into the typed model."""
        return Character.model_validate(self.record)


# =============================================================================
# Character Store
# =============================================================================


class CharacterStore:
    """SQLite-backed character store.

    Records are stored as JSON documents keyed by id.
    """

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        writeback_attempts: int | None = None,
        retry_wait: float = 0.1,
    ) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the database file. Defaults to the configured path.
            writeback_attempts: Attempts for a migration write-back. Defaults
                to the configured value.
            retry_wait: Base delay in seconds between write-back attempts.
        """
        settings = get_settings().storage
        self.db_path = Path(db_path) if db_path is not None else settings.database_path
        self.writeback_attempts = writeback_attempts or settings.writeback_attempts
        self.retry_wait = retry_wait

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Character store initialized", db_path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    record_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Raw Access
    # =========================================================================

    def _write_record(self, record_id: str, record: Mapping[str, Any]) -> None:
        name = record.get("name") if isinstance(record.get("name"), str) else ""
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO characters (id, name, record_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    record_json = excluded.record_json,
                    updated_at = excluded.updated_at
            """, (record_id, name, json.dumps(record, default=str), datetime.now().isoformat()))

    def load_raw(self, record_id: str) -> dict[str, Any] | None:
        """Stored JSON exactly as persisted, without migration.

        Raises:
            PersistenceError: If the database cannot be read or holds invalid JSON.
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT record_json FROM characters WHERE id = ?", (record_id,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read character: {exc}", record_id=record_id) from exc

        if row is None:
            return None
        try:
            return json.loads(row["record_json"])
        except json.JSONDecodeError as exc:
            raise PersistenceError("Stored character is not valid JSON", record_id=record_id) from exc

    # =========================================================================
    # Character Operations
    # =========================================================================

    def save_record(self, record_id: str, record: Character | Mapping[str, Any]) -> None:
        """Persist a record as given. Never migrates.

        Raises:
            PersistenceError: If the write fails.
        """
        data = record.to_record() if isinstance(record, Character) else dict(record)
        try:
            self._write_record(record_id, data)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to save character: {exc}", record_id=record_id) from exc
        logger.debug("Character saved", record_id=record_id)

    def _write_back(self, record_id: str, record: dict[str, Any]) -> None:
        retryer = Retrying(
            retry=retry_if_exception_type(sqlite3.OperationalError),
            stop=stop_after_attempt(self.writeback_attempts),
            wait=wait_exponential(multiplier=self.retry_wait, max=2),
            reraise=True,
        )
        retryer(self._write_record, record_id, record)

    def load_record(self, record_id: str) -> LoadResult | None:
        """Load a record, migrating it to the current schema first.

        Args:
            record_id: Store key.

        Returns:
            LoadResult, or None if no record has that id.

        Raises:
            PersistenceError: If the stored data cannot be read.
            MigrationError: If the stored data is not a character record.
        """
        raw = self.load_raw(record_id)
        if raw is None:
            return None

        with record_context(record_id):
            record = process_character_data(raw)
            result = LoadResult(record_id=record_id, record=record, migrated=record != raw)
            if not result.migrated:
                return result

            try:
                self._write_back(record_id, record)
            except sqlite3.Error as exc:
                logger.warning(
                    "Migration write-back failed",
                    attempts=self.writeback_attempts,
                    error=str(exc),
                )
                result.warnings.append(WRITEBACK_FAILED_WARNING)
            else:
                logger.info("Migrated character saved")
        return result

    def delete_record(self, record_id: str) -> bool:
        """Delete a record.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM characters WHERE id = ?", (record_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Character deleted", record_id=record_id)
        return deleted

    def list_ids(self) -> list[str]:
        """All stored ids, most recently saved first."""
        with self._get_connection() as conn:
            rows = conn.execute("SELECT id FROM characters ORDER BY updated_at DESC, id").fetchall()
        return [row["id"] for row in rows]


__all__ = [
    "WRITEBACK_FAILED_WARNING",
    "LoadResult",
    "CharacterStore",
]
