"""Tests for UnitsService: listing and checking unit tables."""

from __future__ import annotations

from pathlib import Path

from yucon.infrastructure.database import UnitDatabase
from yucon.services import result as codes
from yucon.services.units import UnitsService, unit_to_dict


class TestListUnits:
    def test_all(self, db: UnitDatabase) -> None:
        result = UnitsService(db).list_units()
        assert result.ok
        assert result.op == "list_units"
        assert result.data["count"] == 17
        assert result.data["tags"] == ["default", "imperial", "us"]
        assert result.warnings == []

    def test_by_tag(self, db: UnitDatabase) -> None:
        result = UnitsService(db).list_units(tag="imperial")
        assert [u["name"] for u in result.data["units"]] == ["Gallon (Imperial)"]

    def test_by_type(self, db: UnitDatabase) -> None:
        result = UnitsService(db).list_units(unit_type="temperature")
        assert [u["name"] for u in result.data["units"]] == ["Celsius", "Fahrenheit", "Kelvin"]

    def test_by_tag_and_type(self, db: UnitDatabase) -> None:
        result = UnitsService(db).list_units(tag="us", unit_type="volume")
        assert result.data["count"] == 2

    def test_no_match_warns(self, db: UnitDatabase) -> None:
        result = UnitsService(db).list_units(tag="imperial", unit_type="mass")
        assert result.ok
        assert result.data["count"] == 0
        assert result.warnings == ["No units match tag 'imperial' and type 'mass'"]

    def test_empty_database(self) -> None:
        result = UnitsService(UnitDatabase()).list_units()
        assert result.warnings == ["No units loaded"]

    def test_unit_to_dict(self, db: UnitDatabase) -> None:
        data = unit_to_dict(db.query("in"))
        assert data == {
            "name": "Inch",
            "type": "length",
            "conv_factor": 25.4,
            "zero_point": 0.0,
            "dimensions": 1,
            "inverse": False,
            "aliases": ["Inch", "in"],
            "tags": [],
        }


class TestCheck:
    def test_clean_file(self, units_file: Path) -> None:
        result = UnitsService(UnitDatabase()).check(units_file)
        assert result.ok
        assert result.op == "check"
        assert result.data["units"] == 17
        assert result.data["issues"] == []

    def test_file_with_issues(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.cfg"
        path.write_text(
            "[Foo]\ntype = length\nconv_factor = 1\nconv_factor = 2\nbogus = 1\n",
            encoding="utf-8",
        )
        result = UnitsService(UnitDatabase()).check(path)
        assert not result.ok
        assert result.error.code == codes.PARSE
        assert result.error.message == f"1 error(s), 1 warning(s) in {path}"
        severities = [i["severity"] for i in result.data["issues"]]
        assert severities == ["warning", "error"]
        assert result.data["units"] == 1

    def test_uses_database_tags(self, units_file: Path) -> None:
        service = UnitsService(UnitDatabase(default_tag="base"))
        assert "base" in service.check(units_file).data["tags"]

    def test_missing_file(self, tmp_path: Path) -> None:
        result = UnitsService(UnitDatabase()).check(tmp_path / "nope.cfg")
        assert not result.ok
        assert result.error.code == codes.UNITS_NOT_FOUND
        assert result.data == {}
