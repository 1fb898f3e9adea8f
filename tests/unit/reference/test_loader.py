"""Tests for reference catalog loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from binder_engine.core.exceptions import ReferenceDataError
from binder_engine.reference.loader import (
    BUNDLED_CATALOG_DIR,
    ReferenceDataLoader,
    load_reference_tables,
)


def _write_catalogs(directory: Path, *, spells: bool = True) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "races.json").write_text(
        json.dumps([{"id": "gnome", "name": "Gnome", "allowedClasses": ["illusionist"]}]),
        encoding="utf-8",
    )
    (directory / "classes.json").write_text(
        json.dumps([{"id": "illusionist", "name": "Illusionist", "hitDie": "1d4"}]),
        encoding="utf-8",
    )
    if spells:
        (directory / "spells.json").write_text(
            json.dumps([{"name": "Color Spray", "level": {"illusionist": 1}}]),
            encoding="utf-8",
        )
    return directory


class TestBundledCatalogs:
    """Tests for the catalogs shipped with the package."""

    def test_load_bundled(self) -> None:
        tables = ReferenceDataLoader().load_tables()

        assert ReferenceDataLoader().catalog_dir == BUNDLED_CATALOG_DIR
        assert set(tables.races) == {"human", "dwarf", "elf", "halfling"}
        assert tables.class_("fighter") is not None
        assert tables.class_("fighter").hit_die == "1d8"
        assert tables.spells_for("magic-user", 1)

    def test_bundled_experience_keys_are_levels(self) -> None:
        tables = load_reference_tables()

        assert tables.classes["fighter"].xp_for_level(2) == 2000


class TestCustomCatalogs:
    """Tests for catalogs read from another directory."""

    def test_explicit_directory(self, tmp_path: Path) -> None:
        tables = ReferenceDataLoader(_write_catalogs(tmp_path / "catalogs")).load_tables()

        assert list(tables.races) == ["gnome"]
        assert tables.spells[0].name == "Color Spray"

    def test_configured_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        catalogs = _write_catalogs(tmp_path / "configured")
        monkeypatch.setenv("BINDER_REFERENCE_CATALOG_PATH", str(catalogs))

        assert ReferenceDataLoader().catalog_dir == catalogs

    def test_spells_optional(self, tmp_path: Path) -> None:
        tables = ReferenceDataLoader(_write_catalogs(tmp_path / "nospells", spells=False)).load_tables()

        assert tables.spells == ()


class TestLoaderErrors:
    """Tests for unreadable catalogs."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ReferenceDataError) as exc_info:
            ReferenceDataLoader(tmp_path).load_tables()

        assert exc_info.value.details["source"] == "races.json"

    def test_invalid_json(self, tmp_path: Path) -> None:
        catalogs = _write_catalogs(tmp_path / "broken")
        (catalogs / "classes.json").write_text("[{", encoding="utf-8")

        with pytest.raises(ReferenceDataError, match="not valid JSON"):
            ReferenceDataLoader(catalogs).load_tables()

    def test_not_a_list(self, tmp_path: Path) -> None:
        catalogs = _write_catalogs(tmp_path / "object")
        (catalogs / "races.json").write_text('{"id": "gnome"}', encoding="utf-8")

        with pytest.raises(ReferenceDataError, match="JSON list"):
            ReferenceDataLoader(catalogs).load_races()

    def test_schema_mismatch(self, tmp_path: Path) -> None:
        catalogs = _write_catalogs(tmp_path / "schema")
        (catalogs / "classes.json").write_text('[{"name": "No Id"}]', encoding="utf-8")

        with pytest.raises(ReferenceDataError, match="ClassDefinition"):
            ReferenceDataLoader(catalogs).load_classes()
