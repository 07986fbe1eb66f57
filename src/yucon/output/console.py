"""Rich Console factory and theme for yucon output.

Consoles render into a StringIO buffer so renderers keep the
``format_result() -> str`` contract. Rich drops color codes on its own
when the real stream is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

YUCON_THEME = Theme(
    {
        "yucon.ok": "bold green",
        "yucon.error": "bold red",
        "yucon.warning": "bold yellow",
        "yucon.op": "bold cyan",
        "yucon.key": "dim",
        "yucon.unit": "bold",
        "yucon.value": "cyan",
        "yucon.tag": "magenta",
        "yucon.path": "dim",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "yucon.error",
    "warning": "yucon.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=YUCON_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    return _SEVERITY_STYLES.get(severity, "")
