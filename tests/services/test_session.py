"""Tests for recall substitution and recall-state updates."""

from __future__ import annotations

import pytest

from yucon.domain.errors import RecallError
from yucon.domain.expressions import to_conv_primitive
from yucon.infrastructure.database import UnitDatabase
from yucon.services.conversion import convert_all
from yucon.services.session import SessionState, perform_recall, update_recall


class TestPerformRecall:
    def test_substitutes_everything(self) -> None:
        state = SessionState(last_value=5.0, last_input_unit="m", last_output_unit="mm")
        primitive = to_conv_primitive([";", ":", ":"])
        perform_recall(state, primitive)
        assert primitive.input_vals[0].value == 5.0
        assert primitive.input_unit.alias == "m"
        assert primitive.output_units[0].alias == "mm"

    def test_literals_untouched(self) -> None:
        state = SessionState(last_value=5.0, last_input_unit="m", last_output_unit="mm")
        primitive = to_conv_primitive(["2", "ft", "in"])
        perform_recall(state, primitive)
        assert primitive.input_vals[0].value == 2.0
        assert primitive.input_unit.alias == "ft"

    def test_prefix_kept_on_recalled_unit(self) -> None:
        state = SessionState(last_value=1.0, last_input_unit="m", last_output_unit="m")
        primitive = to_conv_primitive(["1", "_k:", "m"])
        perform_recall(state, primitive)
        assert primitive.input_unit.prefix == "k"
        assert primitive.input_unit.alias == "m"

    def test_value_unset(self) -> None:
        primitive = to_conv_primitive([";", ";", "cm"], complete=False)
        with pytest.raises(RecallError) as exc_info:
            perform_recall(SessionState(), primitive)
        assert exc_info.value.field == "input value"
        assert str(exc_info.value) == "unable to recall variable: input value: not set"

    def test_input_unit_unset(self) -> None:
        with pytest.raises(RecallError, match="input unit"):
            perform_recall(SessionState(last_value=1.0), to_conv_primitive(["1", ":", "m"]))

    def test_output_unit_unset(self) -> None:
        state = SessionState(last_input_unit="m")
        primitive = to_conv_primitive(["1", ":", ":"])
        with pytest.raises(RecallError, match="output unit"):
            perform_recall(state, primitive)
        # earlier substitutions stay
        assert primitive.input_unit.alias == "m"


class TestUpdateRecall:
    def test_success_remembers_all(self, db: UnitDatabase) -> None:
        state = SessionState()
        update_recall(state, convert_all(to_conv_primitive(["5", "m", "mm"]), db))
        assert state == SessionState(last_value=5.0, last_input_unit="m", last_output_unit="mm")

    def test_last_conversion_wins(self, db: UnitDatabase) -> None:
        state = SessionState()
        update_recall(state, convert_all(to_conv_primitive(["1", "2", "m", "mm", "cm"]), db))
        assert state.last_value == 2.0
        assert state.last_output_unit == "cm"

    def test_type_mismatch_still_remembered(self, db: UnitDatabase) -> None:
        state = SessionState()
        update_recall(state, convert_all(to_conv_primitive(["5", "m", "L"]), db))
        assert state == SessionState(last_value=5.0, last_input_unit="m", last_output_unit="L")

    def test_unknown_alias_not_remembered(self, db: UnitDatabase) -> None:
        state = SessionState(last_output_unit="cm")
        update_recall(state, convert_all(to_conv_primitive(["5", "m", "furlong"]), db))
        assert state.last_value == 5.0
        assert state.last_input_unit == "m"
        assert state.last_output_unit == "cm"

    def test_input_out_of_range_keeps_value(self, db: UnitDatabase) -> None:
        state = SessionState(last_value=3.0)
        update_recall(state, convert_all(to_conv_primitive(["inf", "m", "mm"]), db))
        assert state.last_value == 3.0
        assert state.last_input_unit == "m"
        assert state.last_output_unit == "mm"

    def test_output_out_of_range_keeps_input(self, db: UnitDatabase) -> None:
        state = SessionState()
        update_recall(state, convert_all(to_conv_primitive(["0", "mpg", "L/100km"]), db))
        assert state.last_value == 0.0
