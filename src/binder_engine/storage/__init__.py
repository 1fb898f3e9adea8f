"""Persistence layer for character records."""

from binder_engine.storage.database import WRITEBACK_FAILED_WARNING, CharacterStore, LoadResult


__all__ = [
    "WRITEBACK_FAILED_WARNING",
    "CharacterStore",
    "LoadResult",
]
