"""Tests for units.cfg line parsing."""

from __future__ import annotations

import pytest

from yucon.domain.errors import (
    EmptyFieldError,
    InvalidFieldError,
    NoSuchPropertyError,
    NoSuchTypeError,
    PropertySyntaxError,
)
from yucon.domain.properties import (
    Aliases,
    CommonName,
    ConvFactor,
    Dimensions,
    Inverse,
    PropertySyntax,
    Tags,
    UnitType,
    ZeroPoint,
    parse_property_line,
)


class TestNoProperty:
    @pytest.mark.parametrize("line", ["", "   ", "# a comment", "   # indented comment"])
    def test_blank_and_comment_lines(self, line: str) -> None:
        assert parse_property_line(line) is None


class TestCommonName:
    def test_header(self) -> None:
        assert parse_property_line("[Inch]") == CommonName("Inch")

    def test_header_whitespace_stripped(self) -> None:
        assert parse_property_line("  [ Gallon (US) ]  ") == CommonName("Gallon (US)")

    def test_header_with_comment(self) -> None:
        assert parse_property_line("[Foot] # twelve inches") == CommonName("Foot")

    def test_escaped_bracket_in_name(self) -> None:
        assert parse_property_line("[a\\]b]") == CommonName("a]b")

    def test_empty_header(self) -> None:
        with pytest.raises(EmptyFieldError):
            parse_property_line("[]")

    def test_unclosed_header(self) -> None:
        with pytest.raises(PropertySyntaxError, match="expected ']'"):
            parse_property_line("[Inch")

    def test_text_after_header(self) -> None:
        with pytest.raises(PropertySyntaxError, match="whitespace or comment"):
            parse_property_line("[Inch] extra")


class TestListProperties:
    def test_aliases(self) -> None:
        assert parse_property_line("aliases = in, inch") == Aliases(("in", "inch"))

    def test_escaped_comma(self) -> None:
        assert parse_property_line("aliases = a\\,b") == Aliases(("a,b",))

    def test_escaped_hash(self) -> None:
        assert parse_property_line("aliases = \\#foo") == Aliases(("#foo",))

    def test_tags(self) -> None:
        assert parse_property_line("tags = us, imperial") == Tags(("us", "imperial"))

    def test_blank_entries_dropped(self) -> None:
        assert parse_property_line("aliases = a, , b,") == Aliases(("a", "b"))

    def test_empty_list(self) -> None:
        with pytest.raises(EmptyFieldError, match="'aliases'"):
            parse_property_line("aliases =")


class TestScalarProperties:
    def test_type(self) -> None:
        assert parse_property_line("type = fuel economy") == UnitType("fuel economy")

    def test_conv_factor(self) -> None:
        assert parse_property_line("conv_factor = 25.4") == ConvFactor(25.4)

    def test_conv_factor_with_comment(self) -> None:
        assert parse_property_line("conv_factor = 5 # five") == ConvFactor(5.0)

    def test_zero_point(self) -> None:
        assert parse_property_line("zero_point = -273.15") == ZeroPoint(-273.15)

    def test_dimensions(self) -> None:
        assert parse_property_line("dimensions = 2") == Dimensions(2)

    def test_dimensions_explicit_plus(self) -> None:
        assert parse_property_line("dimensions = +3") == Dimensions(3)

    def test_inverse(self) -> None:
        assert parse_property_line("inverse = 1") == Inverse(True)
        assert parse_property_line("inverse = 0") == Inverse(False)

    def test_unknown_type(self) -> None:
        with pytest.raises(NoSuchTypeError) as exc_info:
            parse_property_line("type = parsecs")
        assert exc_info.value.unit_type == "parsecs"

    def test_unknown_property(self) -> None:
        with pytest.raises(NoSuchPropertyError, match="'colour'"):
            parse_property_line("colour = red")

    def test_bad_number(self) -> None:
        with pytest.raises(InvalidFieldError):
            parse_property_line("conv_factor = abc")

    @pytest.mark.parametrize("value", ["2.5", "2.0", "2e0", "300", "-1", "0x2"])
    def test_bad_dimensions(self, value: str) -> None:
        with pytest.raises(InvalidFieldError):
            parse_property_line(f"dimensions = {value}")

    def test_empty_value(self) -> None:
        with pytest.raises(EmptyFieldError, match="'conv_factor'"):
            parse_property_line("conv_factor =")

    def test_missing_equals(self) -> None:
        with pytest.raises(PropertySyntaxError, match="expected '='"):
            parse_property_line("conv_factor 5")

    def test_list_on_scalar_key(self) -> None:
        with pytest.raises(PropertySyntaxError):
            parse_property_line("type = length, area")


class TestSyntaxReuse:
    def test_policy_reused_across_lines(self) -> None:
        syntax = PropertySyntax()
        assert parse_property_line("[Inch]", syntax) == CommonName("Inch")
        assert parse_property_line("aliases = in", syntax) == Aliases(("in",))
