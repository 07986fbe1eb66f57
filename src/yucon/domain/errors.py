"""Exception hierarchy shared by the grammar, database, and recall layers.

Conversion failures are not exceptions: they are recorded on the
``Conversion`` value so a batch request can report each one separately.
"""

from __future__ import annotations


class YuconError(Exception):
    """Base for all yucon errors."""


# --- Tokenizer / grammar ---


class GrammarError(YuconError):
    """A line violated the syntax enforced by a grammar policy.

    ``col`` is zero-based; messages render it one-based.
    """

    def __init__(self, col: int, message: str) -> None:
        self.col = col
        super().__init__(f"syntax error @ col {col + 1}: {message}")


class ExpectedTokenError(GrammarError):
    def __init__(self, col: int, expected: str) -> None:
        self.expected = expected
        super().__init__(col, f"expected {expected}")


class BadEscapeError(GrammarError):
    def __init__(self, col: int, char: str) -> None:
        self.char = char
        super().__init__(col, f"bad escape sequence: \\{char}")


# --- Expression parsing ---


class ExprParseError(YuconError):
    """A number or unit expression could not be parsed."""


class ExprSyntaxError(ExprParseError):
    def __init__(self, error: GrammarError) -> None:
        self.error = error
        super().__init__(str(error))


class BadPrefixError(ExprParseError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"parse error: unknown metric prefix: '{char}'")


class ExprEmptyFieldError(ExprParseError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"parse error: {field} field is empty")


class ConvPrimitiveError(YuconError):
    """Wraps an expression error with the argument index it occurred at."""

    def __init__(self, error: ExprParseError, failed_at: int) -> None:
        self.error = error
        self.failed_at = failed_at
        super().__init__(str(error))


# --- units.cfg properties ---


class PropertyError(YuconError):
    """A units.cfg line could not be turned into a unit property."""


class PropertySyntaxError(PropertyError):
    def __init__(self, error: GrammarError) -> None:
        self.error = error
        super().__init__(str(error))


class NoSuchPropertyError(PropertyError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"at token '{key}': no such unit property exists")


class NoSuchTypeError(PropertyError):
    def __init__(self, unit_type: str) -> None:
        self.unit_type = unit_type
        super().__init__(f"at token '{unit_type}': no such unit type is recognized")


class EmptyFieldError(PropertyError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            f"for property '{key}': expected value(s) after delimiters '=' and '['"
        )


class InvalidFieldError(PropertyError):
    def __init__(self, key: str, value: str, reason: str = "not a valid number") -> None:
        self.key = key
        self.value = value
        super().__init__(f"bad field value for '{key}': '{value}' is {reason}")


# --- Database ---


class UnitCollisionError(YuconError):
    """A unit shares an alias with a unit already registered in one of its tags."""

    def __init__(self, tag: str, alias: str, unit_name: str) -> None:
        self.tag = tag
        self.alias = alias
        self.unit_name = unit_name
        super().__init__(
            f"unit '{unit_name}' collides with an existing unit: "
            f"tag '{tag}', name '{alias}'"
        )


# --- Session ---


class RecallError(YuconError):
    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"unable to recall variable: {field}: {reason}")
