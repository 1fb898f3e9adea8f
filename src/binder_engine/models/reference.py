"""Read-only reference data: races, classes, and spells.

The engine only ever looks these up. Models are frozen so that a table
shared between validation calls cannot be altered by one of them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from binder_engine.core.constants import (
    COMBINATION_MAGIC_USER_CLASSES,
    CUSTOM_CLASS_PREFIX,
    CUSTOM_RACE_ID,
    MAGIC_USER_CLASS_TYPE,
)
from binder_engine.models.enums import Ability


def is_custom_race(race_id: str) -> bool:
    """True if the race id is the freeform-race sentinel."""
    return race_id == CUSTOM_RACE_ID


def is_custom_class(class_id: str) -> bool:
    """True if the class id carries the freeform-class prefix."""
    return class_id.startswith(CUSTOM_CLASS_PREFIX)


def custom_class_name(class_id: str) -> str:
    """Freeform name of a custom class id ('custom-Witch Hunter' -> 'Witch Hunter')."""
    return class_id[len(CUSTOM_CLASS_PREFIX):].strip()


class _ReferenceModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class RaceRequirement(_ReferenceModel):
    """An ability-score bound a character must meet to choose a race."""

    ability: Ability
    min: int | None = None
    max: int | None = None

    def is_met_by(self, score: int) -> bool:
        if self.min is not None and score < self.min:
            return False
        if self.max is not None and score > self.max:
            return False
        return True


class Race(_ReferenceModel):
    """A playable race."""

    id: str
    name: str
    allowed_classes: tuple[str, ...] = ()
    ability_requirements: tuple[RaceRequirement, ...] = ()


class Spellcasting(_ReferenceModel):
    """Spell progression of a class.

    ``spells_per_level`` maps a character level to the number of spells
    known at each spell level (index 0 is first-level spells).
    """

    spells_per_level: dict[int, tuple[int, ...]] = Field(default_factory=dict)

    def slots_at(self, level: int) -> tuple[int, ...]:
        return self.spells_per_level.get(level, ())


class ClassDefinition(_ReferenceModel):
    """A playable class.

    Attributes:
        id: Class id (lowercase slug).
        name: Display name.
        class_type: Rules family, e.g. 'magic-user' for illusionists.
        hit_die: Hit die expression rolled on level-up below the fixed tier.
        experience_table: XP required to reach each level.
        spellcasting: Spell progression, None for non-casters.
    """

    id: str
    name: str
    class_type: str | None = None
    hit_die: str = "1d6"
    experience_table: dict[int, int] = Field(default_factory=dict)
    spellcasting: Spellcasting | None = None

    @property
    def is_magic_user_type(self) -> bool:
        return (
            self.class_type == MAGIC_USER_CLASS_TYPE
            or self.id == MAGIC_USER_CLASS_TYPE
            or self.id in COMBINATION_MAGIC_USER_CLASSES
        )

    @property
    def spell_key(self) -> str:
        """Key used to read this class's level out of a spell's level map."""
        if self.id in COMBINATION_MAGIC_USER_CLASSES:
            return MAGIC_USER_CLASS_TYPE
        return self.id

    def xp_for_level(self, level: int) -> int | None:
        return self.experience_table.get(level)


class SpellDefinition(_ReferenceModel):
    """A catalog spell."""

    name: str
    level: dict[str, int | None] = Field(default_factory=dict)
    description: str | None = None
    range: str | None = None
    duration: str | None = None

    def level_for(self, class_id: str) -> int | None:
        return self.level.get(class_id)


class ReferenceTables(_ReferenceModel):
    """Race, class, and spell tables keyed by identifier."""

    races: dict[str, Race] = Field(default_factory=dict)
    classes: dict[str, ClassDefinition] = Field(default_factory=dict)
    spells: tuple[SpellDefinition, ...] = ()

    @classmethod
    def from_lists(
        cls,
        races: list[Race],
        classes: list[ClassDefinition],
        spells: list[SpellDefinition] | None = None,
    ) -> ReferenceTables:
        return cls(
            races={race.id: race for race in races},
            classes={klass.id: klass for klass in classes},
            spells=tuple(spells or ()),
        )

    def race(self, race_id: str) -> Race | None:
        return self.races.get(race_id)

    def class_(self, class_id: str) -> ClassDefinition | None:
        return self.classes.get(class_id)

    def resolves_class(self, class_id: str) -> bool:
        """True if a class id is custom or present in the class table."""
        return is_custom_class(class_id) or class_id in self.classes

    def spells_for(self, class_id: str, level: int | None = None) -> list[SpellDefinition]:
        """Spells learnable by a class, optionally at one spell level."""
        matches = []
        for spell in self.spells:
            spell_level = spell.level_for(class_id)
            if spell_level is None:
                continue
            if level is None or spell_level == level:
                matches.append(spell)
        return matches


__all__ = [
    "is_custom_race",
    "is_custom_class",
    "custom_class_name",
    "RaceRequirement",
    "Race",
    "Spellcasting",
    "ClassDefinition",
    "SpellDefinition",
    "ReferenceTables",
]
