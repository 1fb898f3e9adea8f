"""Structural detection of persisted record shapes.

Legacy records predate the version tag, so detection probes the record's
structure rather than trusting ``settings.version`` alone. The probe runs
once at load and yields either a LegacyShape or a CurrentShape; the
transform branches on that result and nothing downstream re-inspects the
raw shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from binder_engine.core.constants import CURRENCY_DENOMINATIONS, CURRENT_SCHEMA_VERSION
from binder_engine.core.exceptions import MigrationError


@dataclass(frozen=True)
class LegacyShape:
    """A record in the pre-version layout.

    Attributes:
        split_abilities: Abilities stored as separate 'scores'/'modifiers' maps.
        scalar_currency: Coins stored as top-level gold/silver/... numbers.
        points_hp: Hit points keyed by 'points' instead of 'current'.
    """

    split_abilities: bool
    scalar_currency: bool
    points_hp: bool
    kind: Literal["legacy"] = "legacy"


@dataclass(frozen=True)
class CurrentShape:
    """A record already in the current layout.

    Attributes:
        version: The record's settings.version, None when never stamped.
    """

    version: int | None
    kind: Literal["current"] = "current"

    @property
    def needs_version_stamp(self) -> bool:
        return self.version != CURRENT_SCHEMA_VERSION


RecordShape = LegacyShape | CurrentShape


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _settings_version(raw: Mapping[str, Any]) -> int | None:
    settings = raw.get("settings")
    if isinstance(settings, Mapping):
        version = settings.get("version")
        if isinstance(version, int) and not isinstance(version, bool):
            return version
    return None


def detect_record_shape(raw: Any) -> RecordShape:
    """Classify a raw record as legacy or current.

    Args:
        raw: The record as read from storage.

    Returns:
        LegacyShape if any legacy marker is present and the record is not
        already tagged with the current version, otherwise CurrentShape.

    Raises:
        MigrationError: If the input is not a mapping, or carries a schema
            version newer than this engine understands.
    """
    if not isinstance(raw, Mapping):
        raise MigrationError(
            "Character record must be an object",
            details={"type": type(raw).__name__},
        )

    version = _settings_version(raw)
    if version is not None and version > CURRENT_SCHEMA_VERSION:
        raise MigrationError(
            f"Record schema version {version} is newer than supported version "
            f"{CURRENT_SCHEMA_VERSION}",
            record_name=raw.get("name") if isinstance(raw.get("name"), str) else None,
        )

    abilities = raw.get("abilities")
    split_abilities = (
        isinstance(abilities, Mapping)
        and bool(abilities.get("modifiers"))
        and bool(abilities.get("scores"))
    )
    scalar_currency = any(_is_number(raw.get(name)) for name in CURRENCY_DENOMINATIONS)
    hp = raw.get("hp")
    points_hp = isinstance(hp, Mapping) and hp.get("points") is not None

    if (split_abilities or scalar_currency or points_hp) and version != CURRENT_SCHEMA_VERSION:
        return LegacyShape(
            split_abilities=split_abilities,
            scalar_currency=scalar_currency,
            points_hp=points_hp,
        )
    return CurrentShape(version=version)


def is_legacy_character(raw: Any) -> bool:
    """True if the record needs the legacy transform.

    Non-mapping input is not a legacy character; it is simply not a record.
    """
    if not isinstance(raw, Mapping):
        return False
    try:
        return isinstance(detect_record_shape(raw), LegacyShape)
    except MigrationError:
        return False


__all__ = [
    "LegacyShape",
    "CurrentShape",
    "RecordShape",
    "detect_record_shape",
    "is_legacy_character",
]
