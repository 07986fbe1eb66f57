"""Session recall — ``;`` and ``:`` stand for the last value and units used.

``SessionState`` is owned by whoever drives the conversions (the REPL loop
or a one-shot command) and passed explicitly to each step.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from yucon.domain.errors import RecallError
from yucon.domain.expressions import ConvPrimitive
from yucon.services.conversion import Conversion, ConversionErrorKind

logger = logging.getLogger(__name__)

NOT_SET = "not set"


@dataclass
class SessionState:
    last_value: float | None = None
    last_input_unit: str | None = None
    last_output_unit: str | None = None


def perform_recall(state: SessionState, primitive: ConvPrimitive) -> None:
    """Fill recall-flagged fields of *primitive* in place.

    Values are substituted first, then the input unit, then output units.
    Substitutions made before a failure are kept.

    Raises:
        RecallError: a recalled field has never been set this session.
    """
    for number in primitive.input_vals:
        if number.recall:
            if state.last_value is None:
                raise RecallError("input value", NOT_SET)
            number.value = state.last_value

    if primitive.input_unit.recall:
        if state.last_input_unit is None:
            raise RecallError("input unit", NOT_SET)
        primitive.input_unit.alias = state.last_input_unit

    for unit in primitive.output_units:
        if unit.recall:
            if state.last_output_unit is None:
                raise RecallError("output unit", NOT_SET)
            unit.alias = state.last_output_unit


def update_recall(state: SessionState, conversions: Iterable[Conversion]) -> None:
    """Remember what the finished *conversions* used, later ones winning.

    An input that was out of range is not remembered; neither is an alias
    that did not resolve to a unit.
    """
    for conversion in conversions:
        error = conversion.error
        if error is not None and error.kind is ConversionErrorKind.UNIT_NOT_FOUND:
            if conversion.to_unit is not None:
                state.last_output_unit = conversion.to_alias
            if conversion.from_unit is not None:
                state.last_input_unit = conversion.from_alias
            state.last_value = conversion.input
            continue

        if not (
            error is not None
            and error.kind is ConversionErrorKind.OUT_OF_RANGE
            and not error.output
        ):
            state.last_value = conversion.input
        state.last_input_unit = conversion.from_alias
        state.last_output_unit = conversion.to_alias

    logger.debug("Recall state now %s", state)
