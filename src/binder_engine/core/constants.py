"""Rules constants for the character binder.

Basic Fantasy style values: ability score bounds, schema versioning,
level-up thresholds, and the sentinels used for freeform races and classes.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

ABILITY_SCORE_MIN = 3
"""Lowest rollable ability score (3d6)."""

ABILITY_SCORE_MAX = 18
"""Highest rollable ability score (3d6)."""

ABILITY_NAMES: tuple[str, ...] = (
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
)

# =============================================================================
# Schema Versioning
# =============================================================================

CURRENT_SCHEMA_VERSION = 2
"""Version stamped into settings.version of every current-shape record."""

# =============================================================================
# Custom Content Sentinels
# =============================================================================

CUSTOM_RACE_ID = "custom"
"""Race id marking a freeform race with no ability gating."""

CUSTOM_CLASS_PREFIX = "custom-"
"""Prefix marking a freeform class id."""

# =============================================================================
# Character Naming
# =============================================================================

CHARACTER_NAME_MIN_LENGTH = 2
CHARACTER_NAME_MAX_LENGTH = 50
CHARACTER_NAME_PATTERN = r"^[a-zA-Z\s\-'.]+$"

# =============================================================================
# Level Progression
# =============================================================================

MIN_CHARACTER_LEVEL = 1
MAX_CHARACTER_LEVEL = 20

FIXED_HP_LEVEL_THRESHOLD = 9
"""From this level on, hit point gain is a flat amount instead of a roll."""

TWO_HP_CLASSES: frozenset[str] = frozenset(
    {
        "fighter",
        "thief",
        "assassin",
        "barbarian",
        "ranger",
        "paladin",
        "scout",
        "fighter-magic-user",
        "magic-user-thief",
    }
)
"""Classes that gain 2 HP per level in the fixed-gain tier (others gain 1)."""

DEFAULT_CUSTOM_HIT_DIE = "1d6"

MAGIC_USER_CLASS_TYPE = "magic-user"
COMBINATION_MAGIC_USER_CLASSES: frozenset[str] = frozenset(
    {"fighter-magic-user", "magic-user-thief"}
)
"""Combination classes that look up spell levels under the magic-user key."""

# =============================================================================
# Currency & Equipment
# =============================================================================

CURRENCY_DENOMINATIONS: tuple[str, ...] = (
    "platinum",
    "gold",
    "electrum",
    "silver",
    "copper",
)

DEFAULT_COST_CURRENCY = "gp"
DEFAULT_EQUIPMENT_CATEGORY = "general"


__all__ = [
    "ABILITY_SCORE_MIN",
    "ABILITY_SCORE_MAX",
    "ABILITY_NAMES",
    "CURRENT_SCHEMA_VERSION",
    "CUSTOM_RACE_ID",
    "CUSTOM_CLASS_PREFIX",
    "CHARACTER_NAME_MIN_LENGTH",
    "CHARACTER_NAME_MAX_LENGTH",
    "CHARACTER_NAME_PATTERN",
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "FIXED_HP_LEVEL_THRESHOLD",
    "TWO_HP_CLASSES",
    "DEFAULT_CUSTOM_HIT_DIE",
    "MAGIC_USER_CLASS_TYPE",
    "COMBINATION_MAGIC_USER_CLASSES",
    "CURRENCY_DENOMINATIONS",
    "DEFAULT_COST_CURRENCY",
    "DEFAULT_EQUIPMENT_CATEGORY",
]
