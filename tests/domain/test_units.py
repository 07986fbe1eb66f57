"""Tests for Unit and UnitBuilder."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from yucon.domain.units import MAX_DIMENSIONS, UNIT_TYPES, Unit, UnitBuilder


class TestUnit:
    def test_name_is_an_alias(self) -> None:
        unit = Unit(name="Inch", conv_factor=25.4, unit_type="length", aliases=frozenset({"in"}))
        assert unit.aliases == frozenset({"Inch", "in"})

    def test_defaults(self) -> None:
        unit = Unit(name="Meter", conv_factor=1000.0, unit_type="length")
        assert unit.dimensions == 1
        assert unit.inverse is False
        assert unit.zero_point == 0.0
        assert unit.tagged is False

    def test_frozen(self) -> None:
        unit = Unit(name="Meter", conv_factor=1000.0, unit_type="length")
        with pytest.raises(ValidationError):
            unit.conv_factor = 1.0  # type: ignore[misc]

    def test_dimensions_bounded(self) -> None:
        with pytest.raises(ValidationError):
            Unit(name="X", conv_factor=1.0, unit_type="area", dimensions=MAX_DIMENSIONS + 1)

    def test_types_sorted(self) -> None:
        assert list(UNIT_TYPES) == sorted(UNIT_TYPES)


class TestUnitBuilder:
    def test_build(self) -> None:
        builder = UnitBuilder()
        builder.set_name("Gallon")
        builder.set_conv_factor(3785.411784)
        builder.set_unit_type("volume")
        builder.set_aliases(["gal"])
        builder.set_tags(["us"])
        unit = builder.build()
        assert unit.aliases == frozenset({"Gallon", "gal"})
        assert unit.tags == frozenset({"us"})
        assert unit.tagged

    def test_second_assignment_ignored(self) -> None:
        builder = UnitBuilder()
        assert builder.set_conv_factor(2.0) is True
        assert builder.set_conv_factor(3.0) is False
        assert builder.conv_factor == 2.0

    def test_missing(self) -> None:
        builder = UnitBuilder()
        builder.set_name("Foo")
        assert builder.missing() == ["conv_factor", "type"]
        assert not builder.is_well_formed()

    def test_build_incomplete(self) -> None:
        builder = UnitBuilder()
        builder.set_name("Foo")
        with pytest.raises(ValueError, match="conv_factor, type"):
            builder.build()

    def test_is_set(self) -> None:
        builder = UnitBuilder()
        builder.set_inverse(False)
        assert builder.is_set("inverse")
        assert not builder.is_set("zero_point")
