"""units.cfg line grammar and its semantic layer.

Each line of a units file is one of:

- blank, or a ``#`` comment                 -> no property
- ``[Common Name]``                         -> starts a new unit
- ``key = value``                           -> single-valued property
- ``key = v1, v2, ...``                     -> ``aliases`` and ``tags`` only

A backslash escapes a following delimiter (``[ ] , =``), backslash, or
``#``, so ``aliases = a\\,b`` declares the single alias ``a,b``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum, auto

from yucon.domain.errors import (
    EmptyFieldError,
    ExpectedTokenError,
    GrammarError,
    InvalidFieldError,
    NoSuchPropertyError,
    NoSuchTypeError,
    PropertySyntaxError,
)
from yucon.domain.numbers import parse_float
from yucon.domain.tokenizer import ESCAPE_CHAR, SyntaxPolicy, Token, tokenize
from yucon.domain.units import MAX_DIMENSIONS, UNIT_TYPES

_UNSIGNED_INT = re.compile(r"\+?[0-9]+")

LIST_KEYS = frozenset({"aliases", "tags"})

# --- Property values ---


@dataclass(frozen=True)
class CommonName:
    name: str


@dataclass(frozen=True)
class Aliases:
    values: tuple[str, ...]


@dataclass(frozen=True)
class Tags:
    values: tuple[str, ...]


@dataclass(frozen=True)
class UnitType:
    value: str


@dataclass(frozen=True)
class ConvFactor:
    value: float


@dataclass(frozen=True)
class ZeroPoint:
    value: float


@dataclass(frozen=True)
class Dimensions:
    value: int


@dataclass(frozen=True)
class Inverse:
    value: bool


UnitProperty = CommonName | Aliases | Tags | UnitType | ConvFactor | ZeroPoint | Dimensions | Inverse


# --- Grammar ---


class PropState(Enum):
    KEY = auto()
    OPEN_BRACE = auto()
    COMMON_NAME = auto()
    CLOSE_BRACE = auto()
    EQUALS = auto()
    VALUE = auto()
    COMMA = auto()
    VALIDATE = auto()


_EXPECTED_DELIM: dict[PropState, tuple[str, PropState]] = {
    PropState.OPEN_BRACE: ("[", PropState.COMMON_NAME),
    PropState.CLOSE_BRACE: ("]", PropState.VALIDATE),
    PropState.EQUALS: ("=", PropState.VALUE),
    PropState.COMMA: (",", PropState.VALUE),
}


class PropertySyntax(SyntaxPolicy):
    """FSM for one units.cfg line."""

    def __init__(self) -> None:
        super().__init__()
        self.state = PropState.KEY
        self.list_field = False

    def is_delimiter(self, ch: str) -> bool:
        return ch in "[],="

    def is_comment(self, ch: str) -> bool:
        return ch == "#"

    def is_escape(self, ch: str) -> bool:
        return ch == ESCAPE_CHAR

    def feed_token(self, text: str, delimiter: bool) -> bool:
        if delimiter:
            expected = _EXPECTED_DELIM.get(self.state)
            if expected is None or text != expected[0]:
                self.valid = False
                return False
            self.state = expected[1]
            return True

        match self.state:
            case PropState.KEY:
                key = text.strip()
                if not key:
                    self.state = PropState.OPEN_BRACE
                else:
                    self.list_field = key in LIST_KEYS
                    self.state = PropState.EQUALS
            case PropState.VALUE:
                self.state = PropState.COMMA if self.list_field else PropState.VALIDATE
            case PropState.COMMON_NAME:
                self.state = PropState.CLOSE_BRACE
            case PropState.VALIDATE:
                if text.strip():
                    self.valid = False
                    return False
            case _:
                self.valid = False
                return False
        return True

    def assert_valid(self, index: int, more_tokens: bool) -> None:
        # Never acceptable to stop in these, and errors if the line went bad here.
        if not more_tokens or not self.valid:
            match self.state:
                case PropState.CLOSE_BRACE:
                    raise ExpectedTokenError(index, "']'")
                case PropState.EQUALS:
                    raise ExpectedTokenError(index, "'='")
                case PropState.COMMON_NAME:
                    raise ExpectedTokenError(index, "token after '['")

        # Legal exit states that can still have been violated.
        if not self.valid:
            match self.state:
                case PropState.OPEN_BRACE:
                    raise ExpectedTokenError(index, "'['")
                case PropState.COMMA:
                    raise ExpectedTokenError(index, "','")
                case PropState.VALIDATE:
                    raise ExpectedTokenError(index, "whitespace or comment")

    def reset(self) -> None:
        super().reset()
        self.state = PropState.KEY
        self.list_field = False


# --- Semantic layer ---


def _parse_number(key: str, text: str) -> float:
    value = parse_float(text)
    if value is None:
        raise InvalidFieldError(key, text)
    return value


def _single_value(key: str, tokens: list[Token]) -> str:
    # tokens: key, '=', value
    if len(tokens) < 3:
        raise EmptyFieldError(key)
    return tokens[2].text


def _parse_key_value(tokens: list[Token]) -> UnitProperty:
    key = tokens[0].text

    if key in LIST_KEYS:
        values = tuple(tok.text for tok in tokens[1:] if not tok.delimiter)
        if not values:
            raise EmptyFieldError(key)
        return Aliases(values) if key == "aliases" else Tags(values)

    match key:
        case "conv_factor":
            return ConvFactor(_parse_number(key, _single_value(key, tokens)))
        case "zero_point":
            return ZeroPoint(_parse_number(key, _single_value(key, tokens)))
        case "dimensions":
            raw = _single_value(key, tokens)
            if not _UNSIGNED_INT.fullmatch(raw) or int(raw) > MAX_DIMENSIONS:
                raise InvalidFieldError(key, raw, f"not an integer in 0..{MAX_DIMENSIONS}")
            return Dimensions(int(raw))
        case "inverse":
            raw = _single_value(key, tokens)
            value = _parse_number(key, raw)
            if math.isnan(value):
                raise InvalidFieldError(key, raw)
            return Inverse(value != 0.0)
        case "type":
            unit_type = _single_value(key, tokens)
            if unit_type not in UNIT_TYPES:
                raise NoSuchTypeError(unit_type)
            return UnitType(unit_type)
        case _:
            raise NoSuchPropertyError(key)


def _parse_common_name(tokens: list[Token]) -> CommonName:
    # '[' name ']' once blanks are dropped
    if len(tokens) != 3:
        raise EmptyFieldError("common name")
    return CommonName(tokens[1].text)


def parse_property_line(line: str, syntax: PropertySyntax | None = None) -> UnitProperty | None:
    """Parse one units.cfg line.

    Returns None for blank and comment-only lines.

    Raises:
        PropertyError: the line is malformed.
    """
    syntax = syntax or PropertySyntax()
    try:
        raw_tokens = tokenize(line, syntax)
    except GrammarError as exc:
        raise PropertySyntaxError(exc) from exc

    tokens = [
        Token(tok.text.strip(), tok.delimiter) for tok in raw_tokens if tok.text.strip()
    ]
    if not tokens:
        return None

    if tokens[0].delimiter:
        return _parse_common_name(tokens)
    return _parse_key_value(tokens)
