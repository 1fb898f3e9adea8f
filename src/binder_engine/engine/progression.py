"""Level-up calculator: hit point gain, spell gain, and acceptance.

Calculations are pure. ``calculate_hp_gain`` and ``calculate_spell_gain``
produce artifacts; nothing changes on the character until the caller hands
those artifacts to ``apply_level_up``, which returns a new record.

Example:
    >>> hp = calculate_hp_gain(character, tables.class_("fighter"))
    >>> spells = calculate_spell_gain(tables.class_("fighter"), 1, 2)
    >>> result = apply_level_up(character, hp, spells, [])
    >>> result.character.level
    2
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from binder_engine.core.config import RulesSettings, get_settings
from binder_engine.core.constants import DEFAULT_CUSTOM_HIT_DIE, TWO_HP_CLASSES
from binder_engine.core.exceptions import LevelUpError, ProgressionError
from binder_engine.core.logging import get_logger
from binder_engine.engine.dice import DiceRoller, HitDie, HitDieRoller, parse_hit_die
from binder_engine.migration.transform import ensure_current
from binder_engine.models.character import Character, Spell
from binder_engine.models.progression import (
    HPGainResult,
    LevelUpResult,
    SpellGainInfo,
    SpellLevelGroup,
)
from binder_engine.models.reference import (
    ClassDefinition,
    ReferenceTables,
    SpellDefinition,
    is_custom_class,
)


if TYPE_CHECKING:
    from binder_engine.reference.cache import ReferenceCache


logger = get_logger(__name__)


def _rules(rules: RulesSettings | None) -> RulesSettings:
    return rules if rules is not None else get_settings().rules


# =============================================================================
# Hit Points
# =============================================================================


def _fixed_gain(amount: int, next_level: int) -> HPGainResult:
    return HPGainResult(
        roll=None,
        constitution_bonus=None,
        total=amount,
        max=None,
        breakdown=f"Fixed HP gain (level {next_level}): {amount}",
        is_fixed=True,
    )


def _rolled_gain(character: Character, hit_die: HitDie, roller: HitDieRoller | None) -> HPGainResult:
    roll = (roller or DiceRoller()).roll_hit_die(hit_die)
    constitution = character.abilities.constitution.modifier
    total = max(1, roll.total + constitution)
    sign = "+" if constitution >= 0 else "-"
    return HPGainResult(
        roll=roll.total,
        constitution_bonus=constitution,
        total=total,
        max=hit_die.maximum + constitution,
        breakdown=f"{roll.breakdown} {sign} {abs(constitution)} (Con) = {total}",
        is_fixed=False,
    )


def is_two_hp_class(class_def: ClassDefinition) -> bool:
    """True if the class gains 2 HP per level in the fixed tier."""
    return class_def.id in TWO_HP_CLASSES or class_def.name.lower() in TWO_HP_CLASSES


def calculate_hp_gain(
    record: Character | Mapping[str, Any],
    class_def: ClassDefinition,
    next_level: int | None = None,
    roller: HitDieRoller | None = None,
    *,
    rules: RulesSettings | None = None,
) -> HPGainResult:
    """Hit points gained on reaching the next level.

    At or above the fixed-gain threshold the gain is a flat 2 for two-HP
    classes and 1 otherwise, with no roll and no Constitution bonus. Below
    it the class hit die is rolled, the Constitution modifier added, and
    the total floored at 1.

    Args:
        record: The character before level-up.
        class_def: Definition of the primary class.
        next_level: Level being reached (defaults to current level + 1).
        roller: Hit die roller; a fresh DiceRoller when omitted.
        rules: Rule settings; the configured settings when omitted.

    Returns:
        HPGainResult describing the gain.

    Raises:
        DiceRollError: If the class hit die is malformed, in either tier.
    """
    character = ensure_current(record)
    target = next_level if next_level is not None else character.level + 1
    hit_die = parse_hit_die(class_def.hit_die)

    if character.level >= _rules(rules).fixed_hp_level_threshold:
        result = _fixed_gain(2 if is_two_hp_class(class_def) else 1, target)
    else:
        result = _rolled_gain(character, hit_die, roller)

    logger.info(
        "HP gain calculated",
        class_id=class_def.id,
        level=character.level,
        next_level=target,
        total=result.total,
        is_fixed=result.is_fixed,
    )
    return result


def calculate_hp_gain_for_custom_class(
    record: Character | Mapping[str, Any],
    next_level: int | None = None,
    roller: HitDieRoller | None = None,
    *,
    rules: RulesSettings | None = None,
) -> HPGainResult:
    """Hit point gain for a character whose class is freeform.

    The hit die comes from the record's ``hp.die`` (1d6 when unset); the
    fixed tier always grants 1.

    Raises:
        ProgressionError: If the character has no custom class.
        DiceRollError: If ``hp.die`` is malformed.
    """
    character = ensure_current(record)
    if not any(is_custom_class(class_id) for class_id in character.class_):
        raise ProgressionError(
            "Custom class data not found",
            class_id=character.primary_class,
        )

    target = next_level if next_level is not None else character.level + 1
    die_text = character.hp.die or DEFAULT_CUSTOM_HIT_DIE
    hit_die = parse_hit_die(die_text)

    if character.level >= _rules(rules).fixed_hp_level_threshold:
        result = _fixed_gain(1, target)
    else:
        result = _rolled_gain(character, hit_die, roller)

    logger.info(
        "HP gain calculated",
        class_id=character.primary_class,
        hit_die=die_text,
        level=character.level,
        total=result.total,
        is_fixed=result.is_fixed,
    )
    return result


def calculate_next_level_hp(
    record: Character | Mapping[str, Any],
    tables: ReferenceTables,
    roller: HitDieRoller | None = None,
    *,
    rules: RulesSettings | None = None,
) -> HPGainResult:
    """Dispatch on the primary class: custom classes use ``hp.die``.

    Raises:
        ProgressionError: If the primary class is missing or unknown.
    """
    character = ensure_current(record)
    primary = character.primary_class
    if primary is None:
        raise ProgressionError("Character has no class to level up")
    if is_custom_class(primary):
        return calculate_hp_gain_for_custom_class(character, roller=roller, rules=rules)

    class_def = tables.class_(primary)
    if class_def is None:
        raise ProgressionError(f"Unknown class: {primary}", class_id=primary)
    return calculate_hp_gain(character, class_def, roller=roller, rules=rules)


def manual_hp_gain(total: int) -> HPGainResult:
    """A hand-entered gain, clamped to at least 1."""
    clamped = max(1, int(total))
    return HPGainResult(
        total=clamped,
        breakdown=f"Manual entry: {clamped}",
        is_fixed=False,
    )


# =============================================================================
# Spells
# =============================================================================


def calculate_spell_gain(
    class_def: ClassDefinition | None,
    current_level: int,
    next_level: int,
    custom_class: bool = False,
) -> SpellGainInfo | None:
    """Spell picks gained between two levels.

    Compares the slot lists at each level index by index; every positive
    difference is a set of new picks at that spell level.

    Args:
        class_def: Class definition, or None for a custom class.
        current_level: Level before level-up.
        next_level: Level being reached.
        custom_class: Treat the class as a custom spellcaster, which always
            gains exactly one first-level pick.

    Returns:
        SpellGainInfo, or None when nothing is gained or the class does not
        cast spells.
    """
    if custom_class:
        return SpellGainInfo(level=next_level, new_spells_per_level=(1,), total_gained=1)

    if class_def is None or class_def.spellcasting is None:
        return None

    current = class_def.spellcasting.slots_at(current_level)
    following = class_def.spellcasting.slots_at(next_level)

    gained: list[int] = []
    for index, next_count in enumerate(following):
        current_count = current[index] if index < len(current) else 0
        gained.append(max(0, next_count - current_count))

    total = sum(gained)
    if total == 0:
        return None
    return SpellGainInfo(level=next_level, new_spells_per_level=tuple(gained), total_gained=total)


def calculate_next_level_spells(
    record: Character | Mapping[str, Any],
    tables: ReferenceTables,
) -> SpellGainInfo | None:
    """Spell gain for the primary class on reaching the next level.

    A custom class counts as a spellcaster once the character knows at
    least one spell.
    """
    character = ensure_current(record)
    primary = character.primary_class
    if primary is None:
        return None

    current_level = character.level
    if is_custom_class(primary):
        if not character.spells:
            return None
        return calculate_spell_gain(None, current_level, current_level + 1, custom_class=True)
    return calculate_spell_gain(tables.class_(primary), current_level, current_level + 1)


def group_spell_gain(
    info: SpellGainInfo,
    spells: Iterable[SpellDefinition],
    class_key: str,
) -> SpellGainInfo:
    """Attach the learnable spells for each spell level with new picks.

    Spell levels with no matching spells in the catalog are omitted.
    """
    catalog = list(spells)
    groups: list[SpellLevelGroup] = []
    for index, count in enumerate(info.new_spells_per_level):
        if count <= 0:
            continue
        spell_level = index + 1
        matches = tuple(spell for spell in catalog if spell.level_for(class_key) == spell_level)
        if matches:
            groups.append(SpellLevelGroup(spell_level=spell_level, count=count, spells=matches))
    return info.model_copy(update={"grouped_by_level": tuple(groups)})


async def resolve_spell_gain(
    info: SpellGainInfo,
    cache: ReferenceCache,
    class_key: str,
) -> SpellGainInfo:
    """Like ``group_spell_gain`` but fetches each spell level through the cache."""
    catalog: list[SpellDefinition] = []
    for index, count in enumerate(info.new_spells_per_level):
        if count > 0:
            catalog.extend(await cache.get_spells(class_key, index + 1))
    return group_spell_gain(info, catalog, class_key)


# =============================================================================
# Level-Up Acceptance
# =============================================================================


def can_level_up(
    record: Character | Mapping[str, Any],
    tables: ReferenceTables,
    *,
    rules: RulesSettings | None = None,
) -> bool:
    """True if the character may advance one level.

    Custom classes have no experience table and may always advance;
    standard classes need the XP listed for the next level. Nobody
    advances past the configured level cap.
    """
    character = ensure_current(record)
    if character.level >= _rules(rules).max_character_level:
        return False

    primary = character.primary_class
    if primary is None:
        return False
    if is_custom_class(primary):
        return True

    class_def = tables.class_(primary)
    if class_def is None:
        return False
    required = class_def.xp_for_level(character.level + 1)
    return required is not None and character.xp >= required


def _as_spell(selection: Spell | SpellDefinition) -> Spell:
    if isinstance(selection, Spell):
        return selection
    extra = {"description": selection.description} if selection.description else {}
    return Spell(name=selection.name, level=dict(selection.level), **extra)


def apply_level_up(
    record: Character | Mapping[str, Any],
    hp_gain: HPGainResult,
    spell_gain: SpellGainInfo | None = None,
    selected_spells: Iterable[Spell | SpellDefinition] = (),
    *,
    rules: RulesSettings | None = None,
) -> LevelUpResult:
    """Merge level-up artifacts into a new record in one step.

    The level increases by one, maximum HP grows by the gain and current
    HP is healed to the new maximum, and the selected spells are appended.

    Args:
        record: The character before level-up; never modified.
        hp_gain: Accepted hit point gain.
        spell_gain: Spell picks granted by the level, if any.
        selected_spells: The picks made; must match the granted count.
        rules: Rule settings; the configured settings when omitted.

    Returns:
        LevelUpResult holding the new record.

    Raises:
        LevelUpError: If the number of picks differs from the number granted.
        ProgressionError: If the character is already at the level cap.
    """
    character = ensure_current(record)
    if character.level >= _rules(rules).max_character_level:
        raise ProgressionError(
            f"Character is already at the maximum level ({character.level})",
            class_id=character.primary_class,
        )

    additions = tuple(_as_spell(selection) for selection in selected_spells)
    required = spell_gain.total_gained if spell_gain is not None else 0
    if len(additions) != required:
        raise LevelUpError(
            f"Level-up requires {required} spell selection(s), got {len(additions)}",
            required=required,
            selected=len(additions),
        )

    new_max = character.hp.max + hp_gain.total
    hp = character.hp.model_copy(update={"max": new_max, "current": new_max})
    updated = character.model_copy(
        update={
            "level": character.level + 1,
            "hp": hp,
            "spells": [*character.spells, *additions],
        }
    )

    logger.info(
        "Level up applied",
        name=character.name,
        level=updated.level,
        hp_gained=hp_gain.total,
        spells_added=len(additions),
    )
    return LevelUpResult(
        character=updated,
        previous_level=character.level,
        hp_gain=hp_gain,
        spells_added=additions,
    )


__all__ = [
    "is_two_hp_class",
    "calculate_hp_gain",
    "calculate_hp_gain_for_custom_class",
    "calculate_next_level_hp",
    "manual_hp_gain",
    "calculate_spell_gain",
    "calculate_next_level_spells",
    "group_spell_gain",
    "resolve_spell_gain",
    "can_level_up",
    "apply_level_up",
]
