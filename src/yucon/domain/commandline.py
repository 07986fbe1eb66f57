"""Whitespace-separated command lines, as typed at the REPL prompt."""

from __future__ import annotations

from yucon.domain.tokenizer import ESCAPE_CHAR, SyntaxPolicy


class CommandLineSyntax(SyntaxPolicy):
    """Splits on spaces and never rejects a line.

    Escaped ``:``, ``;``, ``_`` and ``\\`` keep their backslash so the
    number and unit grammars still see the escape. ``argc`` counts the
    non-empty arguments scanned so far.
    """

    def __init__(self) -> None:
        super().__init__()
        self.argc = 0

    def is_delimiter(self, ch: str) -> bool:
        return ch == " "

    def is_comment(self, ch: str) -> bool:
        return ch in "#\r\n"

    def is_escape(self, ch: str) -> bool:
        return ch == ESCAPE_CHAR and not self.escaping

    def is_preserved(self, ch: str) -> bool:
        return ch in ":;_" or (ch == ESCAPE_CHAR and self.escaping)

    def feed_token(self, text: str, delimiter: bool) -> bool:
        if not delimiter and text:
            self.argc += 1
        return True

    def assert_valid(self, index: int, more_tokens: bool) -> None:
        return None

    def reset(self) -> None:
        super().reset()
        self.argc = 0
