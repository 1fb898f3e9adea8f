"""Memoizing async cache for spell lookups.

The cache is an explicit object owned by the caller. Entries are keyed by
``(class_id, level)`` and never invalidated, since reference data does not
change during a process lifetime. Concurrent requests for the same key
share a single fetch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from binder_engine.core.logging import get_logger
from binder_engine.models.reference import ReferenceTables, SpellDefinition
from binder_engine.reference.loader import ReferenceDataLoader


logger = get_logger(__name__)

SpellKey = tuple[str, int | None]
SpellFetcher = Callable[[str, int | None], Awaitable[list[SpellDefinition]]]


class ReferenceCache:
    """Spell lookups memoized per (class, level).

    Args:
        fetcher: Coroutine function ``(class_id, level) -> spells``. When
            omitted, spells are read from ``tables``.
        tables: Reference tables backing the default fetcher. Loaded from
            the configured catalogs on first use when omitted.

    Example:
        >>> cache = ReferenceCache(tables=tables)
        >>> spells = asyncio.run(cache.get_spells("magic-user", 1))
    """

    def __init__(
        self,
        fetcher: SpellFetcher | None = None,
        *,
        tables: ReferenceTables | None = None,
    ) -> None:
        self._fetcher = fetcher or self._fetch_from_tables
        self._tables = tables
        self._entries: dict[SpellKey, tuple[SpellDefinition, ...]] = {}
        self._locks: dict[SpellKey, asyncio.Lock] = {}

    async def _fetch_from_tables(self, class_id: str, level: int | None) -> list[SpellDefinition]:
        if self._tables is None:
            self._tables = ReferenceDataLoader().load_tables()
        return self._tables.spells_for(class_id, level)

    async def get_spells(self, class_id: str, level: int | None = None) -> tuple[SpellDefinition, ...]:
        """Spells learnable by a class, optionally restricted to one spell level."""
        key: SpellKey = (class_id, level)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached
            logger.debug("Fetching spells", class_id=class_id, level=level)
            spells = tuple(await self._fetcher(class_id, level))
            self._entries[key] = spells
            return spells

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
        self._locks.clear()


__all__ = [
    "SpellFetcher",
    "ReferenceCache",
]
