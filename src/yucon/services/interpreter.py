"""REPL line interpreter.

A line is either a command (its first word is a keyword) or a conversion.
Commands finish by raising a :class:`Signal`; conversions return their
argument tokens for the converter service to parse.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum

from yucon.domain.commandline import CommandLineSyntax
from yucon.domain.errors import ExprParseError
from yucon.domain.numbers import parse_number_expr
from yucon.domain.prefixes import NO_PREFIX
from yucon.domain.tokenizer import tokenize
from yucon.domain.unit_expr import parse_unit_expr
from yucon.services.conversion import ConversionFormat, format_number
from yucon.services.session import SessionState

logger = logging.getLogger(__name__)

OKAY = "Okay."
NOT_SET_DISPLAY = "[not set]"
NONLITERAL_RECALL_MSG = "recall variables must be literals"

HELP_TEXT = """\
Conversions:
  <value>... <unit> <target>...    e.g.  5 ft m   |   1 2 3 in cm mm
  ;                                 the last value converted
  :                                 the last input / output unit
  _<p><unit>                        metric prefix p, e.g. _km, _k:
  <unit>@<tag>                      unit from one tag only, e.g. gal@imperial

Commands:
  format [s|d|l]                    show or set the output format
  value [number]                    show or set the recalled value
  input_unit [unit]                 show or set the recalled input unit
  output_unit [unit]                show or set the recalled output unit
  help                              show this message
  version                           show the program version
  exit                              leave the session"""


class SignalKind(StrEnum):
    CMD_SUCCESS = "cmd_success"
    UNRECOGNIZED_CMD = "unrecognized_cmd"
    INVALID_STATE = "invalid_state"
    BLANK_LINE = "blank_line"
    EXIT = "exit"
    HELP = "help"
    VERSION = "version"
    CONVERSION = "conversion"
    INCOMPLETE = "incomplete"


_DESCRIPTIONS = {
    SignalKind.CMD_SUCCESS: "command completed successfully",
    SignalKind.UNRECOGNIZED_CMD: "unrecognized command or variable",
    SignalKind.INVALID_STATE: "invalid variable state",
    SignalKind.BLANK_LINE: "no action",
    SignalKind.EXIT: "user terminated session",
    SignalKind.HELP: "user requested help",
    SignalKind.VERSION: "user requested version",
    SignalKind.CONVERSION: "user issued conversion",
    SignalKind.INCOMPLETE: "command is incomplete",
}


class Signal(Exception):
    """Outcome of a line that was not a conversion.

    ``message`` is the payload: the text a successful command displays,
    the offending token, or the reason a variable could not be set.
    ``command`` is the keyword that produced the signal, when there was one.
    """

    def __init__(self, kind: SignalKind, message: str = "", command: str | None = None) -> None:
        self.kind = kind
        self.message = message
        self.command = command
        super().__init__(str(self))

    def __str__(self) -> str:
        match self.kind:
            case SignalKind.CMD_SUCCESS:
                return self.message
            case SignalKind.UNRECOGNIZED_CMD | SignalKind.INVALID_STATE:
                return f"{_DESCRIPTIONS[self.kind]}: {self.message}"
            case _:
                return _DESCRIPTIONS[self.kind]


class Interpreter:
    """Turns REPL lines into command signals or conversion arguments.

    The recall variables shown and set by ``value``, ``input_unit`` and
    ``output_unit`` live in *state*, shared with the converter.
    """

    def __init__(
        self,
        state: SessionState | None = None,
        *,
        format: ConversionFormat = ConversionFormat.DESC,
        precision: int = 15,
    ) -> None:
        self.state = state if state is not None else SessionState()
        self.format = format
        self.precision = precision
        self._syntax = CommandLineSyntax()

    def interpret(self, line: str) -> list[str]:
        """Interpret one line.

        Returns:
            The conversion arguments, at least three of them.

        Raises:
            Signal: the line was blank, a command, or too short to convert.
            GrammarError: the line could not be tokenized.
        """
        tokens = [tok.text for tok in tokenize(line, self._syntax) if tok and not tok.delimiter]
        if self._syntax.argc == 0:
            raise Signal(SignalKind.BLANK_LINE)

        keyword, args = tokens[0], tokens[1:]
        handler = self._COMMANDS.get(keyword)
        if handler is None:
            if self._syntax.argc < 3:
                raise Signal(SignalKind.INCOMPLETE)
            return tokens

        arity = 0 if keyword in ("exit", "help", "version") else 1
        # checked before the handler runs, so a rejected line never changes state
        if len(args) > arity:
            raise Signal(SignalKind.UNRECOGNIZED_CMD, args[arity], command=keyword)
        signal = handler(self, keyword, args[0] if args else None)
        logger.debug("Command %s -> %s", keyword, signal.kind)
        raise signal

    def interpret_args(self, args: Sequence[str]) -> list[str]:
        """Pre-split variant for the batch command line; no commands apply."""
        tokens = [arg for arg in args if arg]
        if len(tokens) < 3:
            raise Signal(SignalKind.INCOMPLETE)
        return tokens

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _cmd_simple(self, keyword: str, arg: str | None) -> Signal:
        kind = {"exit": SignalKind.EXIT, "help": SignalKind.HELP, "version": SignalKind.VERSION}
        return Signal(kind[keyword], command=keyword)

    def _cmd_format(self, keyword: str, arg: str | None) -> Signal:
        if arg is None:
            return Signal(SignalKind.CMD_SUCCESS, self.format.description, command=keyword)
        fmt = ConversionFormat.from_code(arg) if len(arg) == 1 else None
        if fmt is None:
            return Signal(SignalKind.INVALID_STATE, arg, command=keyword)
        self.format = fmt
        return Signal(SignalKind.CMD_SUCCESS, OKAY, command=keyword)

    def _cmd_value(self, keyword: str, arg: str | None) -> Signal:
        if arg is None:
            value = self.state.last_value
            shown = NOT_SET_DISPLAY if value is None else format_number(value, self.precision)
            return Signal(SignalKind.CMD_SUCCESS, shown, command=keyword)
        try:
            expr = parse_number_expr(arg)
        except ExprParseError as exc:
            return Signal(SignalKind.INVALID_STATE, str(exc), command=keyword)
        if expr.recall:
            return Signal(SignalKind.INVALID_STATE, NONLITERAL_RECALL_MSG, command=keyword)
        self.state.last_value = expr.value
        return Signal(SignalKind.CMD_SUCCESS, OKAY, command=keyword)

    def _cmd_unit(self, keyword: str, arg: str | None) -> Signal:
        is_input = keyword == "input_unit"
        if arg is None:
            current = self.state.last_input_unit if is_input else self.state.last_output_unit
            return Signal(SignalKind.CMD_SUCCESS, current or NOT_SET_DISPLAY, command=keyword)
        try:
            expr = parse_unit_expr(arg)
        except ExprParseError as exc:
            return Signal(SignalKind.INVALID_STATE, str(exc), command=keyword)
        if expr.alias is None or expr.prefix != NO_PREFIX or expr.recall:
            return Signal(SignalKind.INVALID_STATE, NONLITERAL_RECALL_MSG, command=keyword)
        if is_input:
            self.state.last_input_unit = expr.alias
        else:
            self.state.last_output_unit = expr.alias
        return Signal(SignalKind.CMD_SUCCESS, OKAY, command=keyword)

    _COMMANDS = {
        "exit": _cmd_simple,
        "help": _cmd_simple,
        "version": _cmd_simple,
        "format": _cmd_format,
        "value": _cmd_value,
        "input_unit": _cmd_unit,
        "output_unit": _cmd_unit,
    }
