"""Subcommand modules for yucon.

Provides register_commands(), which imports command modules only when the
root group is built so ``yucon --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from yucon.commands.check import check
    from yucon.commands.convert import convert
    from yucon.commands.repl import repl
    from yucon.commands.units import units

    cli.add_command(convert)
    cli.add_command(repl)
    cli.add_command(units)
    cli.add_command(check)
