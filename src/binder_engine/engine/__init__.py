"""Rules engine: dice and level-up progression."""

from binder_engine.engine.dice import DiceRoller, DieRoll, HitDie, HitDieRoller, parse_hit_die
from binder_engine.engine.progression import (
    apply_level_up,
    calculate_hp_gain,
    calculate_hp_gain_for_custom_class,
    calculate_next_level_hp,
    calculate_next_level_spells,
    calculate_spell_gain,
    can_level_up,
    group_spell_gain,
    is_two_hp_class,
    manual_hp_gain,
    resolve_spell_gain,
)


__all__ = [
    # Dice
    "HitDie",
    "DieRoll",
    "HitDieRoller",
    "DiceRoller",
    "parse_hit_die",
    # Progression
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
