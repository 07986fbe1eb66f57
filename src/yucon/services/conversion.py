"""Conversion engine — one value from one unit into another.

Stages, in order:
  1. scale input using prefix and dimensions
  2. invert if the input unit is inverse
  3. change to base units
  4. shift between zero points
  5. change to output units
  6. invert if the output unit is inverse
  7. scale using the output prefix and dimensions

Failures are recorded on the returned :class:`Conversion` rather than
raised, so a batch request can report each pairing separately.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from yucon.domain.expressions import ConvPrimitive
from yucon.domain.prefixes import NO_PREFIX, prefix_factor
from yucon.domain.units import Unit
from yucon.infrastructure.database import UnitDatabase

logger = logging.getLogger(__name__)

INPUT = False
OUTPUT = True


class ConversionErrorKind(StrEnum):
    OUT_OF_RANGE = "out_of_range"
    UNIT_NOT_FOUND = "unit_not_found"
    TYPE_MISMATCH = "type_mismatch"


@dataclass(frozen=True)
class ConversionError:
    """Why a conversion failed. ``output`` says which side was at fault."""

    kind: ConversionErrorKind
    output: bool = INPUT


class ConversionFormat(StrEnum):
    SHORT = "short"
    DESC = "desc"
    LONG = "long"

    @classmethod
    def from_code(cls, code: str) -> ConversionFormat | None:
        """Map the REPL's one-letter codes (``s``, ``d``, ``l``) or full names."""
        for fmt in cls:
            if code in (fmt.value, fmt.value[0]):
                return fmt
        return None

    @property
    def description(self) -> str:
        return _FORMAT_DESCRIPTIONS[self]


_FORMAT_DESCRIPTIONS = {
    ConversionFormat.SHORT: "s: short / value only",
    ConversionFormat.DESC: "d: descriptive / value and output unit",
    ConversionFormat.LONG: "l: long / input and output values and units",
}


@dataclass
class Conversion:
    input: float
    from_prefix: str = NO_PREFIX
    from_alias: str = ""
    from_tag: str | None = None
    to_prefix: str = NO_PREFIX
    to_alias: str = ""
    to_tag: str | None = None
    from_unit: Unit | None = None
    to_unit: Unit | None = None
    value: float | None = None
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def fail(self, kind: ConversionErrorKind, output: bool) -> Conversion:
        self.error = ConversionError(kind, output)
        self.value = None
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.input,
            "from": {"prefix": self.from_prefix, "alias": self.from_alias, "tag": self.from_tag},
            "to": {"prefix": self.to_prefix, "alias": self.to_alias, "tag": self.to_tag},
            "value": self.value,
            "error": (
                None
                if self.error is None
                else {
                    "kind": self.error.kind.value,
                    "side": "output" if self.error.output else "input",
                }
            ),
        }


def is_representable(value: float) -> bool:
    """True for zero and normal floats; NaN, infinities and subnormals fail."""
    if value == 0.0:
        return True
    return math.isfinite(value) and abs(value) >= sys.float_info.min


def _divide(numerator: float, denominator: float) -> float:
    """IEEE 754 division: a zero denominator gives a signed infinity, 0/0 gives NaN."""
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _scale(prefix: str, dimensions: int) -> float:
    factor = prefix_factor(prefix)
    if factor is None:
        raise ValueError(f"unknown metric prefix: {prefix!r}")
    try:
        return factor**dimensions
    except OverflowError:
        return math.inf


def convert(
    value: float,
    from_prefix: str,
    from_alias: str,
    from_tag: str | None,
    to_prefix: str,
    to_alias: str,
    to_tag: str | None,
    database: UnitDatabase,
) -> Conversion:
    """Convert *value* and return the outcome. Short-circuits on the first error."""
    conversion = Conversion(
        input=value,
        from_prefix=from_prefix,
        from_alias=from_alias,
        from_tag=from_tag,
        to_prefix=to_prefix,
        to_alias=to_alias,
        to_tag=to_tag,
    )

    if not is_representable(value):
        return conversion.fail(ConversionErrorKind.OUT_OF_RANGE, INPUT)

    conversion.from_unit = database.query(from_alias, from_tag)
    conversion.to_unit = database.query(to_alias, to_tag)
    src, dst = conversion.from_unit, conversion.to_unit

    # both missing: the output side is the one reported
    if dst is None:
        return conversion.fail(ConversionErrorKind.UNIT_NOT_FOUND, OUTPUT)
    if src is None:
        return conversion.fail(ConversionErrorKind.UNIT_NOT_FOUND, INPUT)

    if src.unit_type != dst.unit_type:
        return conversion.fail(ConversionErrorKind.TYPE_MISMATCH, INPUT)

    # infinities may cancel out through a second inversion
    result = value * _scale(from_prefix, src.dimensions)
    if src.inverse:
        result = _divide(1.0, result)
    result *= src.conv_factor
    result += src.zero_point - dst.zero_point
    result = _divide(result, dst.conv_factor)
    if dst.inverse:
        result = _divide(1.0, result)
    result = _divide(result, _scale(to_prefix, dst.dimensions))

    if not is_representable(result):
        logger.debug("Out of range converting %s %s -> %s: %s", value, from_alias, to_alias, result)
        return conversion.fail(ConversionErrorKind.OUT_OF_RANGE, OUTPUT)

    conversion.value = result
    return conversion


def convert_all(primitive: ConvPrimitive, database: UnitDatabase) -> list[Conversion]:
    """Every input value into every output unit, in encounter order.

    Recall must already have been performed on *primitive*.
    """
    src = primitive.input_unit
    return [
        convert(
            number.value,
            src.prefix,
            src.alias or "",
            src.tag,
            dst.prefix,
            dst.alias or "",
            dst.tag,
            database,
        )
        for number in primitive.input_vals
        for dst in primitive.output_units
    ]


def format_number(value: float, precision: int = 15) -> str:
    """Render a float with *precision* significant digits."""
    return format(value, f".{precision}g")


def render_conversion(
    conversion: Conversion,
    fmt: ConversionFormat = ConversionFormat.DESC,
    precision: int = 15,
) -> str:
    """Human-readable line for *conversion*, or its error message."""
    error = conversion.error
    if error is not None:
        match error.kind:
            case ConversionErrorKind.OUT_OF_RANGE:
                side = "output" if error.output else "input"
                return f"Conversion error: {side} value is out of range"
            case ConversionErrorKind.UNIT_NOT_FOUND:
                alias = conversion.to_alias if error.output else conversion.from_alias
                return f"Conversion error: no unit called '{alias}' was found"
            case ConversionErrorKind.TYPE_MISMATCH:
                src, dst = conversion.from_unit, conversion.to_unit
                assert src is not None and dst is not None
                return (
                    "Conversion error: input and output types differ. "
                    f"'{conversion.from_alias}' is a {src.unit_type} and "
                    f"'{conversion.to_alias}' is a {dst.unit_type}"
                )

    assert conversion.value is not None
    output = format_number(conversion.value, precision)
    target = f"{conversion.to_prefix}{conversion.to_alias}"
    match fmt:
        case ConversionFormat.SHORT:
            return output
        case ConversionFormat.DESC:
            return f"{output} {target}"
        case _:
            source = f"{conversion.from_prefix}{conversion.from_alias}"
            return f"{format_number(conversion.input, precision)} {source} = {output} {target}"
