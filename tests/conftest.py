"""Pytest configuration and shared fixtures.

This module provides common fixtures for the binder engine test suite:
settings isolation, small reference tables, sample records in both the
current and the legacy shape, and deterministic dice rollers.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

import pytest

from binder_engine.engine.dice import DieRoll, HitDie


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from binder_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_database_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the configured database at a per-test temporary file."""
    db_path = tmp_path / "db" / "binder.db"
    monkeypatch.setenv("BINDER_STORAGE_DATABASE_PATH", str(db_path))
    monkeypatch.delenv("BINDER_REFERENCE_CATALOG_PATH", raising=False)
    monkeypatch.delenv("BINDER_RULES_FIXED_HP_LEVEL_THRESHOLD", raising=False)
    monkeypatch.delenv("BINDER_RULES_MAX_CHARACTER_LEVEL", raising=False)
    return db_path


# =============================================================================
# Reference Data Fixtures
# =============================================================================


@pytest.fixture
def reference_tables() -> Any:
    """Small race/class/spell tables covering the rules under test.

    Returns:
        ReferenceTables instance.
    """
    from binder_engine.models.reference import (
        ClassDefinition,
        Race,
        ReferenceTables,
        SpellDefinition,
    )

    races = [
        Race.model_validate(
            {
                "id": "human",
                "name": "Human",
                "allowedClasses": ["fighter", "cleric", "magic-user", "thief", "illusionist"],
            }
        ),
        Race.model_validate(
            {
                "id": "dwarf",
                "name": "Dwarf",
                "allowedClasses": ["fighter", "cleric", "thief"],
                "abilityRequirements": [
                    {"ability": "constitution", "min": 9},
                    {"ability": "charisma", "max": 17},
                ],
            }
        ),
        Race.model_validate(
            {
                "id": "elf",
                "name": "Elf",
                "allowedClasses": ["fighter", "cleric", "magic-user", "thief", "fighter-magic-user"],
                "abilityRequirements": [
                    {"ability": "intelligence", "min": 9},
                    {"ability": "constitution", "max": 17},
                ],
            }
        ),
    ]
    classes = [
        ClassDefinition.model_validate(
            {
                "id": "fighter",
                "name": "Fighter",
                "classType": "fighter",
                "hitDie": "1d8",
                "experienceTable": {"1": 0, "2": 2000, "3": 4000, "9": 240000, "10": 360000},
            }
        ),
        ClassDefinition.model_validate(
            {
                "id": "cleric",
                "name": "Cleric",
                "classType": "cleric",
                "hitDie": "1d6",
                "experienceTable": {"1": 0, "2": 1500, "3": 3000},
                "spellcasting": {
                    "spellsPerLevel": {"1": [], "2": [1], "3": [2], "4": [2, 1]},
                },
            }
        ),
        ClassDefinition.model_validate(
            {
                "id": "magic-user",
                "name": "Magic-User",
                "classType": "magic-user",
                "hitDie": "1d4",
                "experienceTable": {"1": 0, "2": 2500, "3": 5000},
                "spellcasting": {
                    "spellsPerLevel": {"1": [1], "2": [2], "3": [2, 1], "4": [2, 2]},
                },
            }
        ),
        ClassDefinition.model_validate(
            {
                "id": "illusionist",
                "name": "Illusionist",
                "classType": "magic-user",
                "hitDie": "1d4",
                "experienceTable": {"1": 0, "2": 2500},
                "spellcasting": {"spellsPerLevel": {"1": [1], "2": [2]}},
            }
        ),
        ClassDefinition.model_validate(
            {
                "id": "thief",
                "name": "Thief",
                "classType": "thief",
                "hitDie": "1d4",
                "experienceTable": {"1": 0, "2": 1250},
            }
        ),
        ClassDefinition.model_validate(
            {
                "id": "fighter-magic-user",
                "name": "Fighter/Magic-User",
                "classType": "magic-user",
                "hitDie": "1d6",
                "experienceTable": {"1": 0, "2": 4500},
                "spellcasting": {"spellsPerLevel": {"1": [1], "2": [2]}},
            }
        ),
    ]
    spells = [
        SpellDefinition(name="Read Magic", level={"magic-user": 1, "cleric": None}),
        SpellDefinition(name="Magic Missile", level={"magic-user": 1, "cleric": None}),
        SpellDefinition(name="Sleep", level={"magic-user": 1, "cleric": None}),
        SpellDefinition(name="Light", level={"magic-user": 1, "cleric": 1}),
        SpellDefinition(name="Cure Light Wounds", level={"magic-user": None, "cleric": 1}),
        SpellDefinition(name="Bless", level={"magic-user": None, "cleric": 2}),
        SpellDefinition(name="Web", level={"magic-user": 2, "cleric": None}),
        SpellDefinition(name="Invisibility", level={"magic-user": 2, "cleric": None}),
        SpellDefinition(name="Phantasmal Force", level={"illusionist": 1}),
    ]
    return ReferenceTables.from_lists(races, classes, spells)


# =============================================================================
# Record Fixtures
# =============================================================================


def _ability_block(scores: dict[str, int]) -> dict[str, dict[str, int]]:
    modifiers = {3: -3, 4: -2, 5: -2, 6: -1, 7: -1, 8: -1, 13: 1, 14: 1, 15: 1, 16: 2, 17: 2, 18: 3}
    return {name: {"value": value, "modifier": modifiers.get(value, 0)} for name, value in scores.items()}


@pytest.fixture
def sample_ability_scores() -> dict[str, int]:
    """Provide ability scores that satisfy every race in the test tables.

    Returns:
        Dictionary of ability scores.
    """
    return {
        "strength": 16,
        "dexterity": 12,
        "constitution": 14,
        "intelligence": 10,
        "wisdom": 11,
        "charisma": 9,
    }


@pytest.fixture
def sample_record(sample_ability_scores: dict[str, int]) -> dict[str, Any]:
    """A complete current-schema record for a first-level human fighter.

    Returns:
        Record as a wire dict.
    """
    return {
        "name": "Aldric Stone",
        "abilities": _ability_block(sample_ability_scores),
        "race": "human",
        "class": ["fighter"],
        "hp": {"current": 8, "max": 8},
        "currency": {"platinum": 0, "gold": 12, "electrum": 0, "silver": 5, "copper": 0},
        "equipment": [
            {
                "name": "Longsword",
                "costValue": 10,
                "costCurrency": "gp",
                "weight": 4,
                "category": "swords",
                "amount": 1,
                "damage": "1d8",
            }
        ],
        "spells": [],
        "cantrips": [],
        "level": 1,
        "xp": 0,
        "settings": {"version": 2, "useCoinWeight": False},
    }


@pytest.fixture
def sample_character(sample_record: dict[str, Any]) -> Any:
    """The sample record parsed into the typed model.

    Returns:
        Character instance.
    """
    from binder_engine.models.character import Character

    return Character.model_validate(sample_record)


@pytest.fixture
def magic_user_record(sample_record: dict[str, Any]) -> dict[str, Any]:
    """A first-level elf magic-user with one starting spell."""
    record = copy.deepcopy(sample_record)
    record["name"] = "Lirael"
    record["race"] = "elf"
    record["class"] = ["magic-user"]
    record["abilities"]["intelligence"] = {"value": 16, "modifier": 2}
    record["hp"] = {"current": 3, "max": 3}
    record["spells"] = [{"name": "Magic Missile", "level": {"magic-user": 1}}]
    return record


@pytest.fixture
def legacy_record() -> dict[str, Any]:
    """A record in the pre-version layout.

    Returns:
        Legacy record dict.
    """
    return {
        "name": "Old Grimm",
        "abilities": {
            "scores": {
                "strength": 15,
                "dexterity": 10,
                "constitution": 13,
                "intelligence": 9,
                "wisdom": 8,
                "charisma": 12,
            },
            "modifiers": {
                "strength": "+1",
                "dexterity": "0",
                "constitution": "+1",
                "intelligence": "0",
                "wisdom": "-1",
                "charisma": "0",
            },
        },
        "race": "Human",
        "class": "Fighter",
        "hp": {"points": 6, "max": 6, "desc": "Scarred"},
        "gold": 2,
        "silver": 25,
        "equipment": [
            {"name": "Rope", "weight": 5},
            {"name": "Lantern", "costValue": 10, "lightRadius": 30},
        ],
        "level": 1,
        "xp": 150,
        "useCoinWeight": True,
        "wearing": {"armor": "Leather"},
        "settings": {"theme": "dark"},
    }


# =============================================================================
# Engine Fixtures
# =============================================================================


class FixedRoller:
    """Hit die roller that always returns the same total."""

    def __init__(self, total: int) -> None:
        self.total = total
        self.calls: list[HitDie] = []

    def roll_hit_die(self, hit_die: HitDie) -> DieRoll:
        self.calls.append(hit_die)
        return DieRoll(expression=hit_die.expression, total=self.total, dice=(self.total,))


@pytest.fixture
def fixed_roller() -> type[FixedRoller]:
    """Factory for deterministic rollers: ``fixed_roller(5)`` always rolls 5."""
    return FixedRoller


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from binder_engine.engine.dice import DiceRoller

    return DiceRoller(seed=42)
