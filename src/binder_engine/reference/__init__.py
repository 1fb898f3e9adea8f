"""Reference catalogs: loading and cached spell lookups."""

from binder_engine.reference.cache import ReferenceCache, SpellFetcher
from binder_engine.reference.loader import (
    BUNDLED_CATALOG_DIR,
    ReferenceDataLoader,
    load_reference_tables,
)


__all__ = [
    "BUNDLED_CATALOG_DIR",
    "ReferenceDataLoader",
    "load_reference_tables",
    "ReferenceCache",
    "SpellFetcher",
]
