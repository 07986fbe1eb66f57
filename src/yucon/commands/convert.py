"""Command: one-shot conversion from the command line."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yucon.commands._base import YuconCommand

if TYPE_CHECKING:
    from yucon.commands._context import AppContext


@click.command(
    cls=YuconCommand,
    context_settings={"ignore_unknown_options": True},
    examples="""\
  yucon convert 5 ft m
  yucon convert 1 2.5 -40 F C
  yucon convert 3 gal@imperial L _ml
  yucon convert 100 _km mi ft
  yucon 12 in cm                 (shorthand, non-negative values only)""",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def convert(app: AppContext, args: tuple[str, ...]) -> None:
    """Convert VALUE... from UNIT into each TARGET...

    Exits with status 1 if any of the conversions failed.
    """
    app.emit(app.converter().execute_args(list(args)))
