"""Character Binder - rules engine for tabletop character sheets.

Validates character creation step by step, re-checks downstream choices
when upstream selections change, migrates legacy records to the current
schema, and computes level-up hit point and spell gains.

Example:
    >>> from binder_engine import ReferenceDataLoader, validate_step, calculate_hp_gain
    >>>
    >>> tables = ReferenceDataLoader().load_tables()
    >>> result = validate_step(1, {"race": "dwarf"}, tables)
    >>> result.errors
    ["Character doesn't meet ability requirements for Dwarf"]
    >>>
    >>> gain = calculate_hp_gain(record, tables.class_("fighter"), next_level=2)
    >>> print(gain.breakdown)

Modules:
    core: Configuration, logging, constants, and exceptions.
    models: Pydantic V2 schemas for records, reference data, and level-up results.
    validation: Rule primitives, creation step pipeline, cascade validation.
    migration: Legacy record detection and transformation.
    engine: Hit dice and level-up progression.
    reference: Race/class/spell catalogs and the spell lookup cache.
    storage: SQLite character store.
"""

from __future__ import annotations

# Core
from binder_engine.core.config import Settings, get_settings
from binder_engine.core.exceptions import (
    BinderError,
    LevelUpError,
    MigrationError,
    ProgressionError,
)
from binder_engine.core.logging import configure_logging, get_logger

# Models
from binder_engine.models import (
    Character,
    ClassDefinition,
    CreationStep,
    HPGainResult,
    LevelUpResult,
    Race,
    ReferenceTables,
    SpellDefinition,
    SpellGainInfo,
)

# Validation
from binder_engine.validation import (
    CascadeOutcome,
    Rules,
    ValidationPipeline,
    ValidationResult,
    cascade_validate,
    create_rule,
    create_schema,
    is_creation_complete,
    is_step_disabled,
    validate,
    validate_character,
    validate_imported_character,
    validate_step,
)

# Migration
from binder_engine.migration import (
    is_legacy_character,
    load_character,
    migrate_legacy_character,
    process_character_data,
)

# Engine
from binder_engine.engine import (
    DiceRoller,
    apply_level_up,
    calculate_hp_gain,
    calculate_hp_gain_for_custom_class,
    calculate_next_level_hp,
    calculate_next_level_spells,
    calculate_spell_gain,
    can_level_up,
    group_spell_gain,
    manual_hp_gain,
    parse_hit_die,
)

# Reference data & storage
from binder_engine.reference import ReferenceCache, ReferenceDataLoader
from binder_engine.storage import CharacterStore, LoadResult


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "BinderError",
    "MigrationError",
    "ProgressionError",
    "LevelUpError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Character",
    "ClassDefinition",
    "CreationStep",
    "HPGainResult",
    "LevelUpResult",
    "Race",
    "ReferenceTables",
    "SpellDefinition",
    "SpellGainInfo",
    # Validation
    "ValidationResult",
    "Rules",
    "create_rule",
    "create_schema",
    "validate",
    "ValidationPipeline",
    "validate_step",
    "is_step_disabled",
    "is_creation_complete",
    "CascadeOutcome",
    "cascade_validate",
    "validate_character",
    "validate_imported_character",
    # Migration
    "is_legacy_character",
    "migrate_legacy_character",
    "process_character_data",
    "load_character",
    # Engine
    "DiceRoller",
    "parse_hit_die",
    "calculate_hp_gain",
    "calculate_hp_gain_for_custom_class",
    "calculate_next_level_hp",
    "manual_hp_gain",
    "calculate_spell_gain",
    "calculate_next_level_spells",
    "group_spell_gain",
    "can_level_up",
    "apply_level_up",
    # Reference & storage
    "ReferenceDataLoader",
    "ReferenceCache",
    "CharacterStore",
    "LoadResult",
]
