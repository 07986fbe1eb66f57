"""Command: lint a units.cfg file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from yucon.commands._base import YuconCommand

if TYPE_CHECKING:
    from yucon.commands._context import AppContext


@click.command(
    cls=YuconCommand,
    examples="""\
  yucon check
  yucon check ~/.yucon/units.cfg
  yucon -v check my-units.cfg      (show the offending lines)
  yucon --json check""",
)
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.pass_obj
def check(app: AppContext, path: Path | None) -> None:
    """Report bad lines, incomplete units, and alias collisions in PATH.

    PATH defaults to the units file yucon would load. Exits with status 1
    when any problem is found.
    """
    from yucon.services.units import UnitsService

    target = path if path is not None else app.units_path
    app.emit(UnitsService(app.empty_database()).check(target))
