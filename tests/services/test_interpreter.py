"""Tests for REPL line interpretation and the built-in commands."""

from __future__ import annotations

import pytest

from yucon.services.conversion import ConversionFormat
from yucon.services.interpreter import (
    NONLITERAL_RECALL_MSG,
    NOT_SET_DISPLAY,
    OKAY,
    Interpreter,
    Signal,
    SignalKind,
)
from yucon.services.session import SessionState


def _signal(interp: Interpreter, line: str) -> Signal:
    with pytest.raises(Signal) as exc_info:
        interp.interpret(line)
    return exc_info.value


class TestLines:
    @pytest.mark.parametrize("line", ["", "   ", "\n", "# just a comment"])
    def test_blank(self, line: str) -> None:
        assert _signal(Interpreter(), line).kind is SignalKind.BLANK_LINE

    def test_conversion_tokens(self) -> None:
        assert Interpreter().interpret("5 ft m\n") == ["5", "ft", "m"]

    def test_incomplete_conversion(self) -> None:
        signal = _signal(Interpreter(), "5 ft")
        assert signal.kind is SignalKind.INCOMPLETE
        assert str(signal) == "command is incomplete"

    def test_escaped_keyword_is_not_a_command(self) -> None:
        # "\#foo" is a literal token, not a comment
        assert _signal(Interpreter(), "\\#foo").kind is SignalKind.INCOMPLETE


class TestSimpleCommands:
    @pytest.mark.parametrize(
        ("line", "kind"),
        [("exit", SignalKind.EXIT), ("help", SignalKind.HELP), ("version", SignalKind.VERSION)],
    )
    def test_kinds(self, line: str, kind: SignalKind) -> None:
        signal = _signal(Interpreter(), line)
        assert signal.kind is kind
        assert signal.command == line

    def test_extra_argument(self) -> None:
        signal = _signal(Interpreter(), "exit now")
        assert signal.kind is SignalKind.UNRECOGNIZED_CMD
        assert signal.message == "now"
        assert str(signal) == "unrecognized command or variable: now"


class TestFormatCommand:
    def test_show(self) -> None:
        signal = _signal(Interpreter(), "format")
        assert signal.kind is SignalKind.CMD_SUCCESS
        assert str(signal) == "d: descriptive / value and output unit"

    def test_set(self) -> None:
        interp = Interpreter()
        assert str(_signal(interp, "format l")) == OKAY
        assert interp.format is ConversionFormat.LONG

    def test_invalid_code(self) -> None:
        interp = Interpreter()
        signal = _signal(interp, "format x")
        assert signal.kind is SignalKind.INVALID_STATE
        assert str(signal) == "invalid variable state: x"
        assert interp.format is ConversionFormat.DESC

    def test_full_name_rejected(self) -> None:
        assert _signal(Interpreter(), "format long").kind is SignalKind.INVALID_STATE

    def test_too_many_arguments_changes_nothing(self) -> None:
        interp = Interpreter()
        assert _signal(interp, "format s l").kind is SignalKind.UNRECOGNIZED_CMD
        assert interp.format is ConversionFormat.DESC

    def test_extra_argument_wins_over_bad_value(self) -> None:
        signal = _signal(Interpreter(), "format x extra")
        assert signal.kind is SignalKind.UNRECOGNIZED_CMD


class TestValueCommand:
    def test_unset(self) -> None:
        assert str(_signal(Interpreter(), "value")) == NOT_SET_DISPLAY

    def test_set_then_show(self) -> None:
        state = SessionState()
        interp = Interpreter(state)
        assert str(_signal(interp, "value 2.5")) == OKAY
        assert state.last_value == 2.5
        assert str(_signal(interp, "value")) == "2.5"

    def test_precision_applies(self) -> None:
        interp = Interpreter(SessionState(last_value=1.0 / 3.0), precision=4)
        assert str(_signal(interp, "value")) == "0.3333"

    def test_recall_rejected(self) -> None:
        signal = _signal(Interpreter(), "value ;")
        assert signal.kind is SignalKind.INVALID_STATE
        assert signal.message == NONLITERAL_RECALL_MSG

    def test_not_a_number(self) -> None:
        signal = _signal(Interpreter(), "value abc")
        assert signal.kind is SignalKind.INVALID_STATE
        assert "expected float literal" in signal.message


class TestUnitCommands:
    def test_set_and_show_input(self) -> None:
        state = SessionState()
        interp = Interpreter(state)
        assert str(_signal(interp, "input_unit ft")) == OKAY
        assert state.last_input_unit == "ft"
        assert str(_signal(interp, "input_unit")) == "ft"

    def test_output_unset(self) -> None:
        assert str(_signal(Interpreter(), "output_unit")) == NOT_SET_DISPLAY

    def test_set_output(self) -> None:
        state = SessionState()
        _signal(Interpreter(state), "output_unit gal@us")
        assert state.last_output_unit == "gal"

    @pytest.mark.parametrize("arg", [":", "_km", "_k:"])
    def test_nonliteral_rejected(self, arg: str) -> None:
        state = SessionState()
        signal = _signal(Interpreter(state), f"input_unit {arg}")
        assert signal.kind is SignalKind.INVALID_STATE
        assert signal.message == NONLITERAL_RECALL_MSG
        assert state.last_input_unit is None

    def test_bad_prefix(self) -> None:
        signal = _signal(Interpreter(), "output_unit _xm")
        assert signal.kind is SignalKind.INVALID_STATE
        assert "unknown metric prefix" in signal.message


class TestInterpretArgs:
    def test_blank_args_dropped(self) -> None:
        assert Interpreter().interpret_args(["5", "", "ft", "m"]) == ["5", "ft", "m"]

    def test_incomplete(self) -> None:
        with pytest.raises(Signal) as exc_info:
            Interpreter().interpret_args(["5", "ft"])
        assert exc_info.value.kind is SignalKind.INCOMPLETE

    def test_keywords_not_special(self) -> None:
        assert Interpreter().interpret_args(["exit", "a", "b"]) == ["exit", "a", "b"]
