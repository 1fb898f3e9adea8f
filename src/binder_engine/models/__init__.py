"""Pydantic V2 schemas for the binder rules engine.

Submodules:
    enums: Ability, CreationStep.
    character: The current-schema character record.
    reference: Read-only race, class, and spell tables.
    progression: Level-up artifacts (HP gain, spell gain).

Example:
    >>> from binder_engine.models import Character
    >>> hero = Character.model_validate({"name": "Thorin", "class": "fighter"})
    >>> hero.class_
    ['fighter']
"""

from __future__ import annotations

from binder_engine.models.enums import (
    Ability,
    CreationStep,
)
from binder_engine.models.character import (
    Abilities,
    AbilityScore,
    Cantrip,
    Character,
    CharacterSettings,
    Currency,
    EquipmentItem,
    HitPoints,
    Spell,
    SpellPreparation,
)
from binder_engine.models.reference import (
    ClassDefinition,
    Race,
    RaceRequirement,
    ReferenceTables,
    SpellDefinition,
    Spellcasting,
    custom_class_name,
    is_custom_class,
    is_custom_race,
)
from binder_engine.models.progression import (
    HPGainResult,
    LevelUpResult,
    SpellGainInfo,
    SpellLevelGroup,
)


__all__ = [
    # === Enumerations ===
    "Ability",
    "CreationStep",
    # === Character ===
    "Abilities",
    "AbilityScore",
    "Cantrip",
    "Character",
    "CharacterSettings",
    "Currency",
    "EquipmentItem",
    "HitPoints",
    "Spell",
    "SpellPreparation",
    # === Reference ===
    "ClassDefinition",
    "Race",
    "RaceRequirement",
    "ReferenceTables",
    "SpellDefinition",
    "Spellcasting",
    "custom_class_name",
    "is_custom_class",
    "is_custom_race",
    # === Progression ===
    "HPGainResult",
    "LevelUpResult",
    "SpellGainInfo",
    "SpellLevelGroup",
]
