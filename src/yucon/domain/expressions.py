"""Conversion requests assembled from command-line arguments.

A request reads ``<value>... <unit> <target>...``: one or more value
expressions, the input unit, then one or more output units. Every value is
converted into every target.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from yucon.domain.errors import ConvPrimitiveError, ExprEmptyFieldError, ExprParseError
from yucon.domain.numbers import NumberExpr, parse_number_expr
from yucon.domain.unit_expr import UnitExpr, parse_unit_expr


@dataclass
class ConvPrimitive:
    input_vals: list[NumberExpr] = field(default_factory=list)
    input_unit: UnitExpr = field(default_factory=UnitExpr)
    output_units: list[UnitExpr] = field(default_factory=list)


class _Stage(Enum):
    VALUE = auto()
    MORE_VALUES = auto()
    INPUT_UNIT = auto()
    OUTPUT_UNITS = auto()


def to_conv_primitive(args: Sequence[str], *, complete: bool = True) -> ConvPrimitive:
    """Parse pre-split arguments into a :class:`ConvPrimitive`.

    The first argument that is not a value expression is taken as the input
    unit, so ``5 10 m ft`` converts two values. With ``complete=False`` a
    request without output units is returned as-is; the caller runs
    :func:`check_complete` once recall has been performed.

    Raises:
        ConvPrimitiveError: an argument failed to parse, or the request
            lacks a field. ``failed_at`` is the argument index.
    """
    primitive = ConvPrimitive()
    stage = _Stage.VALUE

    for index, arg in enumerate(args):
        try:
            if stage is _Stage.VALUE:
                primitive.input_vals.append(parse_number_expr(arg))
                stage = _Stage.MORE_VALUES
                continue
            if stage is _Stage.MORE_VALUES:
                try:
                    primitive.input_vals.append(parse_number_expr(arg))
                    continue
                except ExprParseError:
                    stage = _Stage.INPUT_UNIT
            if stage is _Stage.INPUT_UNIT:
                primitive.input_unit = parse_unit_expr(arg)
                stage = _Stage.OUTPUT_UNITS
                continue
            primitive.output_units.append(parse_unit_expr(arg))
        except ExprParseError as exc:
            raise ConvPrimitiveError(exc, index) from exc

    if complete:
        check_complete(primitive, len(args))
    return primitive


def check_complete(primitive: ConvPrimitive, argc: int) -> None:
    """Raise ConvPrimitiveError if *primitive* lacks a value or a unit."""
    if not primitive.input_vals:
        raise ConvPrimitiveError(ExprEmptyFieldError("input value"), 0)
    unit = primitive.input_unit
    if unit.alias is None and not unit.recall:
        raise ConvPrimitiveError(ExprEmptyFieldError("input unit"), argc)
    if not primitive.output_units:
        raise ConvPrimitiveError(ExprEmptyFieldError("output unit"), argc)
