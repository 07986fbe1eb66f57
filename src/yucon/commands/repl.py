"""Command: interactive conversion session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yucon.commands._base import YuconCommand

if TYPE_CHECKING:
    from yucon.commands._context import AppContext

PROMPT = ">> "

# results with nothing to show
_SILENT_OPS = frozenset({"blank_line", "exit"})


@click.command(
    cls=YuconCommand,
    examples="""\
  yucon repl
  >> 5 ft m
  >> ; ft in            (same value, new units)
  >> 10 : :             (new value, same units)
  >> format l
  >> exit
  echo '5 ft m' | yucon repl""",
)
@click.pass_obj
def repl(app: AppContext) -> None:
    """Read conversions and commands line by line until EOF or 'exit'.

    Type 'help' inside the session for the expression syntax. Errors are
    reported and the session continues.
    """
    service = app.converter()
    stdin = click.get_text_stream("stdin")
    interactive = stdin.isatty()

    while True:
        if interactive:
            click.echo(PROMPT, nl=False)
        line = stdin.readline()
        if not line:
            if interactive:
                click.echo()
            break

        result = service.execute(line)
        if result.op == "exit" and result.ok:
            break
        if result.op in _SILENT_OPS:
            continue
        app.show(result)
