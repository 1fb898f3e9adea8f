"""Schema migration for persisted character records."""

from binder_engine.migration.shapes import (
    CurrentShape,
    LegacyShape,
    RecordShape,
    detect_record_shape,
    is_legacy_character,
)
from binder_engine.migration.transform import (
    ensure_current,
    load_character,
    migrate_legacy_character,
    parse_modifier,
    process_character_data,
    slugify,
)


__all__ = [
    "LegacyShape",
    "CurrentShape",
    "RecordShape",
    "detect_record_shape",
    "is_legacy_character",
    "parse_modifier",
    "slugify",
    "migrate_legacy_character",
    "process_character_data",
    "load_character",
    "ensure_current",
]
