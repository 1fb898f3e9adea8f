"""Pydantic V2 schemas for the current-version character record.

These models describe the persisted record shape only after migration.
Field names are snake_case in Python and camelCase on the wire
(``costValue``, ``useCoinWeight``); the class list is stored under the
reserved word ``class`` and exposed as ``class_``.

Records allow extra keys so that data written by newer clients, or fields
this engine does not model (avatar, notes, ...), survive a load/save cycle.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from binder_engine.core.constants import (
    CURRENCY_DENOMINATIONS,
    DEFAULT_COST_CURRENCY,
    DEFAULT_EQUIPMENT_CATEGORY,
)
from binder_engine.models.enums import Ability


class _RecordModel(BaseModel):
    """Shared configuration for wire-compatible record models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# =============================================================================
# Abilities
# =============================================================================


class AbilityScore(_RecordModel):
    """A single ability: raw value and its derived modifier.

    The 3..18 range is a validation rule, not a model constraint, so an
    unrolled sheet (value 0) can still be represented.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    value: int = 0
    modifier: int = 0


class Abilities(_RecordModel):
    """The six named ability scores."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    strength: AbilityScore = Field(default_factory=AbilityScore)
    dexterity: AbilityScore = Field(default_factory=AbilityScore)
    constitution: AbilityScore = Field(default_factory=AbilityScore)
    intelligence: AbilityScore = Field(default_factory=AbilityScore)
    wisdom: AbilityScore = Field(default_factory=AbilityScore)
    charisma: AbilityScore = Field(default_factory=AbilityScore)

    def get(self, ability: Ability | str) -> AbilityScore:
        """Look up an ability by name."""
        return getattr(self, Ability(ability).value)

    def values(self) -> list[AbilityScore]:
        """All six scores in canonical order."""
        return [self.get(ability) for ability in Ability]


# =============================================================================
# Hit Points & Currency
# =============================================================================


class HitPoints(_RecordModel):
    """Hit point block.

    Attributes:
        current: Current hit points.
        max: Maximum hit points.
        die: Hit die expression for custom classes (e.g. '1d6').
        desc: Free-text note shown on the sheet.
    """

    current: int = 0
    max: int = 0
    die: str | None = None
    desc: str | None = None


class Currency(_RecordModel):
    """Coins carried, one counter per denomination."""

    platinum: int = Field(default=0, ge=0)
    gold: int = Field(default=0, ge=0)
    electrum: int = Field(default=0, ge=0)
    silver: int = Field(default=0, ge=0)
    copper: int = Field(default=0, ge=0)

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in CURRENCY_DENOMINATIONS}


# =============================================================================
# Equipment & Spells
# =============================================================================


class EquipmentItem(_RecordModel):
    """An equipment entry; unknown keys (damage, AC, ...) are preserved."""

    name: str
    cost_value: float = 0
    cost_currency: str = DEFAULT_COST_CURRENCY
    weight: float = 0
    category: str = DEFAULT_EQUIPMENT_CATEGORY
    amount: int = Field(default=1, ge=0)


class SpellPreparation(_RecordModel):
    """Which daily slot a prepared spell occupies."""

    slot_level: int = Field(ge=1)
    slot_index: int = Field(default=0, ge=0)


class Spell(_RecordModel):
    """A known spell.

    ``level`` maps a class id to the spell's level for that class, or None
    when the class cannot learn it.
    """

    name: str
    level: dict[str, int | None] = Field(default_factory=dict)
    preparation: SpellPreparation | None = None

    def level_for(self, class_id: str) -> int | None:
        return self.level.get(class_id)


class Cantrip(_RecordModel):
    """A cantrip or orison."""

    name: str
    description: str | None = None


# =============================================================================
# Character Record
# =============================================================================


class CharacterSettings(_RecordModel):
    """Per-record settings, including the schema version tag."""

    version: int | None = None
    use_coin_weight: bool = False


class Character(_RecordModel):
    """Current-schema character record.

    Attributes:
        name: Character name.
        abilities: The six ability scores.
        race: Race id, the custom sentinel, or '' when unset.
        class_: Ordered class ids (wire key ``class``).
        hp: Hit point block.
        currency: Coins carried.
        equipment: Equipment list.
        spells: Known spells, optionally with preparation metadata.
        cantrips: Known cantrips/orisons.
        level: Character level.
        xp: Experience points.
        settings: Record settings with the schema version.
    """

    name: str = ""
    abilities: Abilities = Field(default_factory=Abilities)
    race: str = ""
    class_: list[str] = Field(default_factory=list, alias="class")
    hp: HitPoints = Field(default_factory=HitPoints)
    currency: Currency = Field(default_factory=Currency)
    equipment: list[EquipmentItem] = Field(default_factory=list)
    spells: list[Spell] = Field(default_factory=list)
    cantrips: list[Cantrip] = Field(default_factory=list)
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    settings: CharacterSettings = Field(default_factory=CharacterSettings)

    @field_validator("class_", mode="before")
    @classmethod
    def coerce_class_list(cls, value: Any) -> Any:
        """Accept a single class id string as a one-element list."""
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value else []
        return value

    @property
    def primary_class(self) -> str | None:
        """First selected class id, if any."""
        return self.class_[0] if self.class_ else None

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted (camelCase) record shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "AbilityScore",
    "Abilities",
    "HitPoints",
    "Currency",
    "EquipmentItem",
    "SpellPreparation",
    "Spell",
    "Cantrip",
    "CharacterSettings",
    "Character",
]
