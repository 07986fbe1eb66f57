"""Unit expressions.

Legal shapes, each optionally followed by ``@tag``::

    ft          alias
    :           recall the last unit
    _km         metric prefix ``k`` + alias ``m``
    _k:         metric prefix ``k`` + recalled unit

Aliases containing ``_``, ``:`` or ``@`` must escape them with ``\\``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from yucon.domain.errors import BadPrefixError, ExpectedTokenError, ExprSyntaxError, GrammarError
from yucon.domain.prefixes import NO_PREFIX, is_prefix
from yucon.domain.tokenizer import ESCAPE_CHAR, SyntaxPolicy, Token, tokenize

PREFIX_MARK = "_"
RECALL_UNIT = ":"
TAG_MARK = "@"

_NAME_OR_RECALL = "unit name or recall expression"
_PREFIXED = "metric prefix together with unit name / recall expression"


class UnitState(Enum):
    NAME_OR_EXPR = auto()
    UNDERSCORE_OR_COLON = auto()
    PREFIX_OR_NAME = auto()
    COLON = auto()
    FINISH_OR_TAG = auto()
    TAG = auto()
    FINISH = auto()


class UnitSyntax(SyntaxPolicy):
    """FSM for a single unit expression."""

    def __init__(self) -> None:
        super().__init__()
        self.state = UnitState.NAME_OR_EXPR

    def is_delimiter(self, ch: str) -> bool:
        return ch in (PREFIX_MARK, RECALL_UNIT, TAG_MARK)

    def is_escape(self, ch: str) -> bool:
        return ch == ESCAPE_CHAR

    def feed_token(self, text: str, delimiter: bool) -> bool:
        if not self.valid:
            return False

        match self.state:
            case UnitState.NAME_OR_EXPR if not delimiter:
                self.state = UnitState.FINISH_OR_TAG if text else UnitState.UNDERSCORE_OR_COLON
            case UnitState.UNDERSCORE_OR_COLON if delimiter:
                if text == PREFIX_MARK:
                    self.state = UnitState.PREFIX_OR_NAME
                elif text == RECALL_UNIT:
                    self.state = UnitState.FINISH_OR_TAG
                else:
                    self.valid = False
            case UnitState.PREFIX_OR_NAME if not delimiter:
                if not text:
                    self.valid = False
                elif len(text) < 2:
                    self.state = UnitState.COLON
                else:
                    self.state = UnitState.FINISH_OR_TAG
            case UnitState.COLON if delimiter:
                if text == RECALL_UNIT:
                    self.state = UnitState.FINISH_OR_TAG
                else:
                    self.valid = False
            case UnitState.FINISH_OR_TAG:
                # An empty token here is the blank after a ':' delimiter.
                if text == TAG_MARK and delimiter:
                    self.state = UnitState.TAG
                elif text:
                    self.valid = False
            case UnitState.TAG if not delimiter:
                if text:
                    self.state = UnitState.FINISH
                else:
                    self.valid = False
            case UnitState.FINISH:
                if text:
                    self.valid = False
            case _:
                self.valid = False
        return self.valid

    def assert_valid(self, index: int, more_tokens: bool) -> None:
        if not more_tokens or not self.valid:
            match self.state:
                case UnitState.NAME_OR_EXPR | UnitState.UNDERSCORE_OR_COLON:
                    raise ExpectedTokenError(index, _NAME_OR_RECALL)
                case UnitState.PREFIX_OR_NAME | UnitState.COLON:
                    raise ExpectedTokenError(index, _PREFIXED)
                case UnitState.TAG:
                    raise ExpectedTokenError(index, "a non-empty tag for the unit")

        if not self.valid:
            match self.state:
                case UnitState.FINISH_OR_TAG:
                    raise ExpectedTokenError(
                        index, "a tag or nothing at all after unit name / recall expression"
                    )
                case UnitState.FINISH:
                    raise ExpectedTokenError(index, "nothing following a tag")

    def reset(self) -> None:
        super().reset()
        self.state = UnitState.NAME_OR_EXPR


@dataclass
class UnitExpr:
    """A unit reference. ``recall`` means the alias comes from the session."""

    prefix: str = NO_PREFIX
    alias: str | None = None
    recall: bool = False
    tag: str | None = None

    def label(self) -> str:
        """Prefix and alias as typed, e.g. ``km``."""
        return f"{self.prefix}{self.alias or ''}"


def _take_tag(tokens: list[Token], expr: UnitExpr) -> None:
    if tokens and tokens[0].delimiter and tokens[0].text == TAG_MARK:
        expr.tag = tokens[1].text


def parse_unit_expr(text: str) -> UnitExpr:
    """Parse a unit expression.

    Raises:
        ExprSyntaxError: *text* violates the unit expression grammar.
        BadPrefixError: the character after ``_`` is not a metric prefix.
    """
    try:
        tokens = [tok for tok in tokenize(text, UnitSyntax()) if tok]
    except GrammarError as exc:
        raise ExprSyntaxError(exc) from exc

    if not tokens:
        raise ExprSyntaxError(ExpectedTokenError(0, _PREFIXED))

    expr = UnitExpr()
    head, rest = tokens[0], tokens[1:]

    if head.delimiter and head.text == PREFIX_MARK:
        body = rest[0].text
        prefix = body[0]
        if not is_prefix(prefix) or prefix == NO_PREFIX:
            raise BadPrefixError(prefix)
        expr.prefix = prefix
        if len(body) > 1:
            expr.alias = body[1:]
            rest = rest[1:]
        else:
            # '_k' is always followed by ':' after the syntax check
            expr.recall = True
            rest = rest[2:]
    elif head.delimiter and head.text == RECALL_UNIT:
        expr.recall = True
    else:
        expr.alias = head.text

    _take_tag(rest, expr)
    return expr
