"""Reference catalog loading.

Catalogs are three JSON files: ``races.json``, ``classes.json`` and
``spells.json``, each holding a list of objects in the wire (camelCase)
shape. The catalogs bundled with the package live in ``reference/data``;
a different directory can be configured with
``BINDER_REFERENCE_CATALOG_PATH``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from binder_engine.core.config import get_settings
from binder_engine.core.exceptions import ReferenceDataError
from binder_engine.core.logging import get_logger
from binder_engine.models.reference import (
    ClassDefinition,
    Race,
    ReferenceTables,
    SpellDefinition,
)


logger = get_logger(__name__)

BUNDLED_CATALOG_DIR = Path(__file__).parent / "data"

RACES_FILE = "races.json"
CLASSES_FILE = "classes.json"
SPELLS_FILE = "spells.json"


class ReferenceDataLoader:
    """Reads race, class, and spell catalogs into ReferenceTables.

    Example:
        >>> tables = ReferenceDataLoader().load_tables()
        >>> tables.race("dwarf").name
        'Dwarf'
    """

    def __init__(self, catalog_dir: Path | str | None = None) -> None:
        """Initialize the loader.

        Args:
            catalog_dir: Directory holding the catalogs. Defaults to the
                configured catalog path, then to the bundled catalogs.
        """
        if catalog_dir is None:
            catalog_dir = get_settings().reference.catalog_path or BUNDLED_CATALOG_DIR
        self.catalog_dir = Path(catalog_dir)

    def _read(self, filename: str) -> list[dict[str, Any]]:
        path = self.catalog_dir / filename
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise ReferenceDataError(f"Catalog file not found: {path}", source=filename) from exc
        except json.JSONDecodeError as exc:
            raise ReferenceDataError(
                f"Catalog file is not valid JSON: {path}",
                source=filename,
                details={"line": exc.lineno},
            ) from exc

        if not isinstance(data, list):
            raise ReferenceDataError(f"Catalog must be a JSON list: {path}", source=filename)
        return data

    def _parse(self, filename: str, model: type[BaseModel]) -> list[Any]:
        entries = self._read(filename)
        try:
            return [model.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise ReferenceDataError(
                f"Catalog entry does not match the {model.__name__} schema",
                source=filename,
                details={"errors": exc.error_count()},
            ) from exc

    def load_races(self) -> list[Race]:
        return self._parse(RACES_FILE, Race)

    def load_classes(self) -> list[ClassDefinition]:
        return self._parse(CLASSES_FILE, ClassDefinition)

    def load_spells(self) -> list[SpellDefinition]:
        """Spells are optional; a missing spells.json yields an empty list."""
        if not (self.catalog_dir / SPELLS_FILE).exists():
            return []
        return self._parse(SPELLS_FILE, SpellDefinition)

    def load_tables(self) -> ReferenceTables:
        """Load all three catalogs.

        Raises:
            ReferenceDataError: If a catalog is missing, unreadable, or invalid.
        """
        races = self.load_races()
        classes = self.load_classes()
        spells = self.load_spells()
        logger.info(
            "Reference data loaded",
            catalog_dir=str(self.catalog_dir),
            races=len(races),
            classes=len(classes),
            spells=len(spells),
        )
        return ReferenceTables.from_lists(races, classes, spells)


def load_reference_tables(catalog_dir: Path | str | None = None) -> ReferenceTables:
    """Convenience wrapper around ``ReferenceDataLoader.load_tables``."""
    return ReferenceDataLoader(catalog_dir).load_tables()


__all__ = [
    "BUNDLED_CATALOG_DIR",
    "ReferenceDataLoader",
    "load_reference_tables",
]
