"""Tests for REPL command-line tokenizing."""

from __future__ import annotations

import pytest

from yucon.domain.commandline import CommandLineSyntax
from yucon.domain.errors import BadEscapeError
from yucon.domain.tokenizer import tokenize


def _args(line: str) -> tuple[list[str], int]:
    syntax = CommandLineSyntax()
    tokens = [t.text for t in tokenize(line, syntax) if t and not t.delimiter]
    return tokens, syntax.argc


class TestCommandLine:
    def test_splits_on_spaces(self) -> None:
        assert _args("5 ft m") == (["5", "ft", "m"], 3)

    def test_repeated_spaces(self) -> None:
        assert _args("  5   ft  m ") == (["5", "ft", "m"], 3)

    def test_newline_ends_line(self) -> None:
        assert _args("5 ft m\n") == (["5", "ft", "m"], 3)

    def test_comment(self) -> None:
        assert _args("value # show it") == (["value"], 1)

    def test_escaped_comment_char(self) -> None:
        assert _args("\\#foo") == (["#foo"], 1)

    def test_escaped_space(self) -> None:
        assert _args("5 a\\ b m") == (["5", "a b", "m"], 3)

    @pytest.mark.parametrize("text", ["\\:", "\\;", "\\_", "\\\\"])
    def test_preserved_escapes(self, text: str) -> None:
        assert _args(text) == ([text], 1)

    def test_blank(self) -> None:
        assert _args("   ") == ([], 0)

    def test_bad_escape(self) -> None:
        with pytest.raises(BadEscapeError):
            _args("a\\x")
