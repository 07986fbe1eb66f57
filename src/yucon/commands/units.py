"""Command: list the loaded units."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yucon.commands._base import YuconCommand
from yucon.domain.units import UNIT_TYPES

if TYPE_CHECKING:
    from yucon.commands._context import AppContext


@click.command(
    cls=YuconCommand,
    examples="""\
  yucon units
  yucon units --type length
  yucon units --tag imperial
  yucon -q units --type volume     (names only)""",
)
@click.option("--tag", default=None, help="Only units registered under this tag.")
@click.option(
    "--type",
    "unit_type",
    type=click.Choice(UNIT_TYPES),
    default=None,
    help="Only units of this type.",
)
@click.pass_obj
def units(app: AppContext, tag: str | None, unit_type: str | None) -> None:
    """List units from the active units.cfg."""
    from yucon.services.units import UnitsService

    app.emit(UnitsService(app.database).list_units(tag=tag, unit_type=unit_type))
