"""Policy-driven tokenizer shared by every yucon micro-grammar.

The scanner knows nothing about any particular syntax. A
:class:`SyntaxPolicy` decides which characters are delimiters, comment
starts, or escapes, and validates the token stream as it is produced.

Delimiters always separate two tokens, so blank normal tokens appear on
either side of chained or leading/trailing delimiters. Callers filter them.
Comments are discarded entirely: neither the comment character nor the
text after it is returned.
"""

from __future__ import annotations

from dataclasses import dataclass

from yucon.domain.errors import BadEscapeError

ESCAPE_CHAR = "\\"


@dataclass(frozen=True)
class Token:
    """A scanned token, tagged so a literal ``,`` can't pass for a delimiter."""

    text: str
    delimiter: bool = False

    @classmethod
    def normal(cls, text: str) -> Token:
        return cls(text, delimiter=False)

    @classmethod
    def delim(cls, text: str) -> Token:
        return cls(text, delimiter=True)

    def __bool__(self) -> bool:
        return bool(self.text)


class SyntaxPolicy:
    """Base for the grammar state machines driven by :func:`tokenize`.

    Subclasses override the character classifiers and the three FSM hooks.
    ``escaping`` is owned by the tokenizer while a line is being scanned;
    policies may read it to change how they classify characters.
    """

    escape_char: str = ESCAPE_CHAR

    def __init__(self) -> None:
        self.escaping = False
        self.valid = True

    # -- character classes --

    def is_delimiter(self, ch: str) -> bool:
        return False

    def is_comment(self, ch: str) -> bool:
        return False

    def is_escape(self, ch: str) -> bool:
        return False

    def is_preserved(self, ch: str) -> bool:
        """Escaped chars re-emitted with their escape for a later grammar stage."""
        return False

    # -- state machine --

    def feed_token(self, text: str, delimiter: bool) -> bool:
        """Advance the FSM. The return value is informational only."""
        raise NotImplementedError

    def assert_valid(self, index: int, more_tokens: bool) -> None:
        """Raise a :class:`GrammarError` if the current state is unacceptable.

        With ``more_tokens`` true the line is still being scanned and only
        outright violations fail; with it false the state must also be a
        legal exit state.
        """
        raise NotImplementedError

    def reset(self) -> None:
        self.escaping = False
        self.valid = True


def tokenize(line: str, policy: SyntaxPolicy) -> list[Token]:
    """Split *line* into tokens according to *policy*.

    Raises:
        GrammarError: the line violates the policy's syntax.
    """
    policy.reset()
    if not line:
        return [Token.normal("")]

    tokens: list[Token] = []
    buffer: list[str] = []
    delim_pushed = False
    last = 0
    last_ch = ""

    def emit(token: Token) -> None:
        policy.feed_token(token.text, token.delimiter)
        tokens.append(token)

    for index, ch in enumerate(line):
        if policy.is_escape(ch) and not policy.escaping:
            policy.escaping = True
        elif policy.escaping:
            if policy.is_delimiter(ch) or policy.is_escape(ch) or policy.is_comment(ch):
                buffer.append(ch)
            elif policy.is_preserved(ch):
                buffer.append(policy.escape_char)
                buffer.append(ch)
            else:
                raise BadEscapeError(index, ch)
            policy.escaping = False
            delim_pushed = False
        elif policy.is_delimiter(ch):
            emit(Token.normal("".join(buffer)))
            emit(Token.delim(ch))
            buffer.clear()
            delim_pushed = True
        elif policy.is_comment(ch):
            emit(Token.normal("".join(buffer)))
            policy.assert_valid(index, more_tokens=False)
            return tokens
        else:
            buffer.append(ch)
            delim_pushed = False

        policy.assert_valid(index, more_tokens=True)
        last = index
        last_ch = ch

    if policy.escaping:
        raise BadEscapeError(last, "" if last_ch == policy.escape_char else last_ch)

    if buffer or delim_pushed:
        emit(Token.normal("".join(buffer)))

    policy.assert_valid(last, more_tokens=False)
    return tokens
