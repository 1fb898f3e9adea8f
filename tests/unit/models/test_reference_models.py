"""Tests for reference data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from binder_engine.models.reference import (
    ClassDefinition,
    RaceRequirement,
    ReferenceTables,
    Spellcasting,
    custom_class_name,
    is_custom_class,
    is_custom_race,
)


class TestCustomContent:
    """Tests for the freeform race and class helpers."""

    def test_custom_race_sentinel(self) -> None:
        assert is_custom_race("custom")
        assert not is_custom_race("Custom")
        assert not is_custom_race("half-orc")

    def test_custom_class_prefix(self) -> None:
        assert is_custom_class("custom-Witch Hunter")
        assert not is_custom_class("fighter")

    def test_custom_class_name(self) -> None:
        assert custom_class_name("custom-Witch Hunter") == "Witch Hunter"
        assert custom_class_name("custom-  ") == ""


class TestRaceRequirement:
    """Tests for ability bounds on races."""

    @pytest.mark.parametrize(
        ("requirement", "score", "expected"),
        [
            ({"ability": "constitution", "min": 9}, 9, True),
            ({"ability": "constitution", "min": 9}, 8, False),
            ({"ability": "charisma", "max": 17}, 17, True),
            ({"ability": "charisma", "max": 17}, 18, False),
            ({"ability": "strength"}, 3, True),
        ],
    )
    def test_is_met_by(self, requirement: dict, score: int, expected: bool) -> None:
        assert RaceRequirement.model_validate(requirement).is_met_by(score) is expected


class TestClassDefinition:
    """Tests for class definitions."""

    def test_string_level_keys_coerced(self) -> None:
        """Test JSON-style level keys parse as integers."""
        definition = ClassDefinition.model_validate(
            {
                "id": "cleric",
                "name": "Cleric",
                "experienceTable": {"2": 1500},
                "spellcasting": {"spellsPerLevel": {"2": [1]}},
            }
        )

        assert definition.xp_for_level(2) == 1500
        assert definition.xp_for_level(3) is None
        assert definition.spellcasting is not None
        assert definition.spellcasting.slots_at(2) == (1,)
        assert definition.spellcasting.slots_at(1) == ()

    def test_magic_user_type(self, reference_tables: ReferenceTables) -> None:
        """Test magic-user family detection."""
        assert reference_tables.classes["magic-user"].is_magic_user_type
        assert reference_tables.classes["illusionist"].is_magic_user_type
        assert reference_tables.classes["fighter-magic-user"].is_magic_user_type
        assert not reference_tables.classes["cleric"].is_magic_user_type

    def test_spell_key(self, reference_tables: ReferenceTables) -> None:
        """Test combination classes read spells under the magic-user key."""
        assert reference_tables.classes["fighter-magic-user"].spell_key == "magic-user"
        assert reference_tables.classes["illusionist"].spell_key == "illusionist"

    def test_frozen(self) -> None:
        definition = ClassDefinition(id="fighter", name="Fighter")

        with pytest.raises(ValidationError):
            definition.hit_die = "1d12"  # type: ignore[misc]


class TestReferenceTables:
    """Tests for table lookups."""

    def test_lookups(self, reference_tables: ReferenceTables) -> None:
        assert reference_tables.race("dwarf") is not None
        assert reference_tables.race("gnome") is None
        assert reference_tables.class_("thief") is not None

    def test_resolves_class(self, reference_tables: ReferenceTables) -> None:
        assert reference_tables.resolves_class("fighter")
        assert reference_tables.resolves_class("custom-Witch Hunter")
        assert not reference_tables.resolves_class("bard")

    def test_spells_for(self, reference_tables: ReferenceTables) -> None:
        names = {spell.name for spell in reference_tables.spells_for("magic-user", 1)}

        assert names == {"Read Magic", "Magic Missile", "Sleep", "Light"}
        assert len(reference_tables.spells_for("cleric")) == 3

    def test_empty_spellcasting(self) -> None:
        assert Spellcasting().slots_at(1) == ()
