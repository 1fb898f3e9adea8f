"""Legacy-to-current record transform.

``process_character_data`` is the single load-time entry point: it probes
the record shape once and takes exactly one of two paths. The legacy path
is deterministic and idempotent, so running it on its own output changes
nothing. Missing substructures are defaulted rather than treated as errors.
Input records are never mutated.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from binder_engine.core.constants import (
    ABILITY_NAMES,
    CURRENCY_DENOMINATIONS,
    CURRENT_SCHEMA_VERSION,
    DEFAULT_COST_CURRENCY,
    DEFAULT_EQUIPMENT_CATEGORY,
)
from binder_engine.core.exceptions import MigrationError
from binder_engine.core.logging import get_logger
from binder_engine.migration.shapes import LegacyShape, detect_record_shape
from binder_engine.models.character import Character


logger = get_logger(__name__)

_MODIFIER_RE = re.compile(r"^[+-]?\d+$")
_OBSOLETE_FIELDS = ("useCoinWeight", "wearing")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_int(value: Any, default: int = 0) -> int:
    if _is_number(value):
        return int(value)
    if isinstance(value, str) and _MODIFIER_RE.match(value.strip()):
        return int(value.strip())
    return default


def parse_modifier(value: Any) -> int:
    """Parse a stored modifier ('+2', '-1', 3) into a signed integer.

    Unparseable values become 0.
    """
    if _is_number(value):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _MODIFIER_RE.match(text):
            return int(text)
    return 0


def slugify(value: str) -> str:
    """Canonical identifier form: lowercase, hyphen-separated, [a-z0-9-] only.

    Example:
        >>> slugify("Magic User")
        'magic-user'
    """
    text = re.sub(r"\s+", "-", value.strip().lower())
    text = re.sub(r"[^a-z0-9-]", "", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-")


# =============================================================================
# Per-section transforms
# =============================================================================


def _merge_abilities(abilities: Mapping[str, Any]) -> dict[str, dict[str, int]]:
    scores = abilities.get("scores") or {}
    modifiers = abilities.get("modifiers") or {}
    return {
        name: {
            "value": _as_int(scores.get(name)),
            "modifier": parse_modifier(modifiers.get(name, "+0")),
        }
        for name in ABILITY_NAMES
    }


def _collapse_currency(record: dict[str, Any]) -> dict[str, int]:
    existing = record.get("currency")
    base = existing if isinstance(existing, Mapping) else {}
    currency: dict[str, int] = {}
    for name in CURRENCY_DENOMINATIONS:
        scalar = record.pop(name, None)
        if _is_number(scalar):
            count = int(scalar)
        else:
            count = _as_int(base.get(name))
        currency[name] = max(0, count)
    return currency


def _normalize_hp(hp: Any) -> dict[str, Any]:
    if not isinstance(hp, Mapping):
        return {"current": 0, "max": 0}

    maximum = _as_int(hp.get("max"))
    if hp.get("points") is not None:
        current = _as_int(hp.get("points"), maximum)
    elif hp.get("current") is not None:
        current = _as_int(hp.get("current"), maximum)
    else:
        current = maximum

    normalized: dict[str, Any] = {"current": current, "max": maximum}
    for optional in ("die", "desc"):
        if hp.get(optional):
            normalized[optional] = hp[optional]
    return normalized


def _normalize_equipment_item(item: Any) -> dict[str, Any]:
    if not isinstance(item, Mapping):
        item = {"name": str(item)}
    defaults: dict[str, Any] = {
        "name": "Unknown Item",
        "costValue": 0,
        "costCurrency": DEFAULT_COST_CURRENCY,
        "weight": 0,
        "category": DEFAULT_EQUIPMENT_CATEGORY,
        "amount": 1,
    }
    normalized = dict(item)
    for key, default in defaults.items():
        if normalized.get(key) is None or normalized.get(key) == "":
            normalized[key] = default
    return normalized


def _normalize_classes(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    slugs = [slugify(class_id) for class_id in value if isinstance(class_id, str)]
    return [slug for slug in slugs if slug]


# =============================================================================
# Public API
# =============================================================================


def migrate_legacy_character(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Transform a legacy record into the current schema.

    Args:
        raw: The legacy record. Not modified.

    Returns:
        A new dict in the current schema, tagged with the current version.
    """
    migrated: dict[str, Any] = copy.deepcopy(dict(raw))

    abilities = migrated.get("abilities")
    if isinstance(abilities, Mapping) and abilities.get("modifiers") and abilities.get("scores"):
        migrated["abilities"] = _merge_abilities(abilities)

    migrated["currency"] = _collapse_currency(migrated)
    migrated["hp"] = _normalize_hp(migrated.get("hp"))

    equipment = migrated.get("equipment")
    if isinstance(equipment, list):
        migrated["equipment"] = [_normalize_equipment_item(item) for item in equipment]
    else:
        migrated["equipment"] = []

    race = migrated.get("race")
    migrated["race"] = slugify(race) if isinstance(race, str) else ""
    migrated["class"] = _normalize_classes(migrated.get("class"))

    if not isinstance(migrated.get("name"), str) or not migrated["name"].strip():
        migrated["name"] = "Unnamed Character"
    level = migrated.get("level")
    if not isinstance(level, int) or isinstance(level, bool) or level < 1:
        migrated["level"] = 1
    xp = migrated.get("xp")
    if not isinstance(xp, int) or isinstance(xp, bool) or xp < 0:
        migrated["xp"] = 0

    settings = migrated.get("settings")
    settings = dict(settings) if isinstance(settings, Mapping) else {}
    use_coin_weight = bool(migrated.get("useCoinWeight") or settings.get("useCoinWeight"))
    settings["version"] = CURRENT_SCHEMA_VERSION
    settings["useCoinWeight"] = use_coin_weight
    migrated["settings"] = settings

    for obsolete in _OBSOLETE_FIELDS:
        migrated.pop(obsolete, None)

    return migrated


def _stamp_version(raw: Mapping[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = copy.deepcopy(dict(raw))
    settings = record.get("settings")
    settings = dict(settings) if isinstance(settings, Mapping) else {}
    settings["version"] = CURRENT_SCHEMA_VERSION
    record["settings"] = settings
    return record


def process_character_data(raw: Any) -> dict[str, Any]:
    """Bring a persisted record to the current schema.

    Legacy records are migrated; current-shape records pass through
    unchanged apart from stamping an absent version.

    Args:
        raw: The record as read from storage.

    Returns:
        A current-schema record (always a new dict).

    Raises:
        MigrationError: If the input is not a record at all.
    """
    shape = detect_record_shape(raw)

    if isinstance(shape, LegacyShape):
        logger.info(
            "Migrating legacy character",
            name=raw.get("name") or "Unknown",
            split_abilities=shape.split_abilities,
            scalar_currency=shape.scalar_currency,
            points_hp=shape.points_hp,
        )
        return migrate_legacy_character(raw)

    if shape.needs_version_stamp:
        logger.debug("Stamping schema version", previous=shape.version)
        return _stamp_version(raw)
    return copy.deepcopy(dict(raw))


def load_character(raw: Any) -> Character:
    """Process a raw record and parse it into the typed model.

    Raises:
        MigrationError: If the processed record still does not fit the schema.
    """
    record = process_character_data(raw)
    try:
        return Character.model_validate(record)
    except ValidationError as exc:
        raise MigrationError(
            "Character record does not match the current schema",
            record_name=record.get("name"),
            details={"errors": exc.error_count()},
        ) from exc


def ensure_current(record: Character | Mapping[str, Any]) -> Character:
    """Return a typed record whose shape is trusted to be current.

    Typed records already tagged with the current version are returned
    as-is; anything else goes through the load path first.
    """
    if isinstance(record, Character):
        if record.settings.version == CURRENT_SCHEMA_VERSION:
            return record
        return load_character(record.to_record())
    return load_character(record)


__all__ = [
    "parse_modifier",
    "slugify",
    "migrate_legacy_character",
    "process_character_data",
    "load_character",
    "ensure_current",
]
