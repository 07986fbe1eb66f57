"""Value expressions: a float literal, or ``;`` to recall the last value."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from yucon.domain.errors import ExpectedTokenError, ExprSyntaxError, GrammarError
from yucon.domain.tokenizer import SyntaxPolicy, tokenize

RECALL_VALUE = ";"

# float() also takes digit-group underscores and surrounding whitespace; neither
# is a legal literal here.
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def parse_float(text: str) -> float | None:
    """Parse a float literal, returning None when *text* is not one."""
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


class NumberState(Enum):
    FLOAT_LITERAL = auto()
    SEMICOLON = auto()
    TRAILING = auto()


class NumberSyntax(SyntaxPolicy):
    """FSM for ``<float>`` or ``;``. Escapes are not allowed."""

    def __init__(self) -> None:
        super().__init__()
        self.state = NumberState.FLOAT_LITERAL

    def is_delimiter(self, ch: str) -> bool:
        return ch == RECALL_VALUE

    def is_comment(self, ch: str) -> bool:
        return ch == "#"

    def feed_token(self, text: str, delimiter: bool) -> bool:
        if not self.valid:
            return False

        match self.state:
            case NumberState.FLOAT_LITERAL if not delimiter:
                if not text:
                    self.state = NumberState.SEMICOLON
                elif parse_float(text) is not None:
                    self.state = NumberState.TRAILING
                else:
                    self.valid = False
            case NumberState.SEMICOLON if delimiter:
                if text == RECALL_VALUE:
                    self.state = NumberState.TRAILING
                else:
                    self.valid = False
            case NumberState.TRAILING:
                if text:
                    self.valid = False
            case _:
                self.valid = False
        return self.valid

    def assert_valid(self, index: int, more_tokens: bool) -> None:
        if not more_tokens or not self.valid:
            match self.state:
                case NumberState.FLOAT_LITERAL:
                    raise ExpectedTokenError(index, "float literal")
                case NumberState.SEMICOLON:
                    raise ExpectedTokenError(index, "float literal or recall expression")

        if not self.valid and self.state is NumberState.TRAILING:
            raise ExpectedTokenError(index, "nothing after value expression")

    def reset(self) -> None:
        super().reset()
        self.state = NumberState.FLOAT_LITERAL


@dataclass
class NumberExpr:
    """A value to convert. ``recall`` means take it from the session."""

    value: float = 0.0
    recall: bool = False


def parse_number_expr(text: str) -> NumberExpr:
    """Parse a value expression such as ``2.5``, ``-4e3``, or ``;``.

    Raises:
        ExprSyntaxError: *text* is neither a float literal nor ``;``.
    """
    try:
        tokens = [tok for tok in tokenize(text, NumberSyntax()) if tok]
    except GrammarError as exc:
        raise ExprSyntaxError(exc) from exc

    if not tokens:
        raise ExprSyntaxError(ExpectedTokenError(0, "float literal or recall expression"))

    token = tokens[0]
    if token.delimiter:
        return NumberExpr(recall=True)
    value = parse_float(token.text)
    assert value is not None
    return NumberExpr(value=value)
