"""Eligibility checks shared by the step pipeline and the cascade validator.

Every function here re-derives its answer from the record and the reference
tables on each call; nothing is cached, so results cannot drift from the
current selections.
"""

from __future__ import annotations

from binder_engine.core.constants import ABILITY_SCORE_MAX, ABILITY_SCORE_MIN
from binder_engine.models.character import Character, Spell
from binder_engine.models.reference import (
    ClassDefinition,
    Race,
    ReferenceTables,
    custom_class_name,
    is_custom_class,
)


def has_valid_ability_scores(character: Character) -> bool:
    """All six scores are within the rollable range."""
    return all(
        ABILITY_SCORE_MIN <= score.value <= ABILITY_SCORE_MAX
        for score in character.abilities.values()
    )


def is_race_eligible(character: Character, race: Race) -> bool:
    """Character meets every ability requirement of the race."""
    return all(
        requirement.is_met_by(character.abilities.get(requirement.ability).value)
        for requirement in race.ability_requirements
    )


def eligible_races(character: Character, tables: ReferenceTables) -> list[Race]:
    return [race for race in tables.races.values() if is_race_eligible(character, race)]


def unresolved_classes(character: Character, tables: ReferenceTables) -> list[str]:
    """Class ids that are neither custom nor present in the class table."""
    return [class_id for class_id in character.class_ if not tables.resolves_class(class_id)]


def unnamed_custom_classes(character: Character) -> list[str]:
    return [
        class_id
        for class_id in character.class_
        if is_custom_class(class_id) and not custom_class_name(class_id)
    ]


def disallowed_classes(character: Character, race: Race, tables: ReferenceTables) -> list[str]:
    """Standard classes the race does not permit.

    Custom classes take the liberal path and are always permitted; unknown
    ids are reported by ``unresolved_classes`` instead.
    """
    return [
        class_id
        for class_id in character.class_
        if not is_custom_class(class_id)
        and class_id in tables.classes
        and class_id not in race.allowed_classes
    ]


def selected_class_definitions(
    character: Character, tables: ReferenceTables
) -> list[ClassDefinition]:
    """Class definitions for the standard classes in the record, in order."""
    return [
        definition
        for definition in (tables.class_(class_id) for class_id in character.class_)
        if definition is not None
    ]


def has_custom_class(character: Character) -> bool:
    return any(is_custom_class(class_id) for class_id in character.class_)


def first_level_spells(character: Character, definition: ClassDefinition) -> list[Spell]:
    return [spell for spell in character.spells if spell.level_for(definition.spell_key) == 1]


def classes_missing_starting_spells(
    character: Character, tables: ReferenceTables
) -> list[ClassDefinition]:
    """Magic-user type classes without a first-level starting spell.

    Divine casters and custom classes have no starting-spell requirement.
    """
    return [
        definition
        for definition in selected_class_definitions(character, tables)
        if definition.spellcasting is not None
        and definition.is_magic_user_type
        and not first_level_spells(character, definition)
    ]


def starting_spell_message(definition: ClassDefinition) -> str:
    label = "Illusionists" if "illusionist" in definition.id else "Magic-Users"
    return f"{label} must select one first level spell (Read Magic is automatically known)."


def has_valid_hit_points(character: Character) -> bool:
    return character.hp.max > 0 and character.hp.current > 0


def spell_keys(character: Character, tables: ReferenceTables) -> set[str]:
    """Keys under which the record's standard classes read spell levels."""
    return {definition.spell_key for definition in selected_class_definitions(character, tables)}


def is_spell_resolvable(spell: Spell, character: Character, tables: ReferenceTables) -> bool:
    """A spell still belongs to the character's class list.

    Spells with an empty level map are user-authored and always resolvable,
    as is every spell of a character with a custom class.
    """
    if has_custom_class(character):
        return True
    levels = {key for key, value in spell.level.items() if value is not None}
    if not levels:
        return True
    return bool(levels & spell_keys(character, tables))


def highest_slot_level(character: Character, tables: ReferenceTables) -> int:
    """Highest spell level with at least one slot at the character's level."""
    highest = 0
    for definition in selected_class_definitions(character, tables):
        if definition.spellcasting is None:
            continue
        slots = definition.spellcasting.slots_at(character.level)
        for index, count in enumerate(slots):
            if count > 0:
                highest = max(highest, index + 1)
    return highest


__all__ = [
    "has_valid_ability_scores",
    "is_race_eligible",
    "eligible_races",
    "unresolved_classes",
    "unnamed_custom_classes",
    "disallowed_classes",
    "selected_class_definitions",
    "has_custom_class",
    "first_level_spells",
    "classes_missing_starting_spells",
    "starting_spell_message",
    "has_valid_hit_points",
    "spell_keys",
    "is_spell_resolvable",
    "highest_slot_level",
]
