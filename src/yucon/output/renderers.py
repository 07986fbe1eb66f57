"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
extracts the text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. User-supplied
text is always wrapped in :class:`~rich.text.Text` so brackets in unit
names or messages are never read as markup.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from yucon.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from yucon.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    renderer = _OP_RENDERERS.get(result.op)
    if renderer is not None and (result.ok or (result.op in _RENDER_ON_FAILURE and result.data)):
        renderer(result, console, verbose=verbose)
    elif result.ok:
        _render_generic(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    lines = result.data.get("lines")
    if isinstance(lines, list):
        return "\n".join(str(line) for line in lines)

    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "message" in result.data:
        return str(result.data["message"])

    units = result.data.get("units")
    if isinstance(units, list):
        return "\n".join(str(u.get("name", "")) for u in units if isinstance(u, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="yucon.ok"), Text(f"  {result.op}", style="yucon.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="yucon.key")
    style = "yucon.path" if key == "path" else ""
    console.print(k, Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="yucon.error"),
        Text(f"  {result.op}", style="yucon.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Conversion / REPL renderers ───────────────────────────────────────


def _render_conversions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """One line per conversion, failures styled as errors."""
    conversions = result.data.get("conversions", [])
    for index, line in enumerate(result.data.get("lines", [])):
        failed = index < len(conversions) and conversions[index].get("error") is not None
        console.print(Text(line, style="yucon.error" if failed else ""), soft_wrap=True)


def _render_message(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    message = result.data.get("message")
    if message:
        console.print(Text(str(message)), soft_wrap=True)


def _render_silent(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    return None


# ── Unit table renderers ──────────────────────────────────────────────


def _units_table(units: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="yucon.unit", no_wrap=True)
    table.add_column("Type")
    table.add_column("Factor", style="yucon.value", justify="right")
    if verbose:
        table.add_column("Zero", justify="right")
        table.add_column("Dims", justify="right")
        table.add_column("Inverse")
    table.add_column("Aliases")
    table.add_column("Tags", style="yucon.tag")

    for unit in units:
        row = [
            Text(str(unit.get("name", ""))),
            Text(str(unit.get("type", ""))),
            Text(f"{unit.get('conv_factor', 0.0):.15g}"),
        ]
        if verbose:
            row.append(Text(f"{unit.get('zero_point', 0.0):.15g}"))
            row.append(Text(str(unit.get("dimensions", 1))))
            row.append(Text("yes" if unit.get("inverse") else ""))
        aliases = [a for a in unit.get("aliases", []) if a != unit.get("name")]
        row.append(Text(", ".join(aliases)))
        row.append(Text(", ".join(unit.get("tags", []))))
        table.add_row(*row)
    return table


def _render_units(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    units = result.data.get("units", [])
    if units:
        console.print(_units_table(units, verbose=verbose))
    count = result.data.get("count", len(units))
    console.print(Text(f"{count} unit{'s' if count != 1 else ''}", style="dim"))


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render load issues as a table of line / severity / message."""
    issues = result.data.get("issues", [])
    path = result.data.get("path", "")
    units = result.data.get("units", 0)
    tags = result.data.get("tags", [])

    if not issues:
        line = Text("OK", style="yucon.ok")
        line.append(f"  {path}: {units} units in {len(tags)} tags")
        console.print(line)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Severity")
    table.add_column("Message")
    if verbose:
        table.add_column("Text", style="dim")

    for issue in issues:
        severity = str(issue.get("severity", "error"))
        row = [
            Text(str(issue.get("line_no", ""))),
            Text(severity, style=style_for_severity(severity)),
            Text(str(issue.get("message", ""))),
        ]
        if verbose:
            row.append(Text(str(issue.get("line", ""))))
        table.add_row(*row)

    console.print(Text(str(path), style="yucon.path"))
    console.print(table)
    errors = sum(1 for i in issues if i.get("severity") == "error")
    console.print(f"\n{errors} errors, {len(issues) - errors} warnings")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "convert": _render_conversions,
    "format": _render_message,
    "value": _render_message,
    "input_unit": _render_message,
    "output_unit": _render_message,
    "help": _render_message,
    "version": _render_message,
    "exit": _render_silent,
    "blank_line": _render_silent,
    "list_units": _render_units,
    "check": _render_check,
}

# ops whose data is still worth rendering when ok is False
_RENDER_ON_FAILURE = frozenset({"convert", "check"})
