"""Root CLI group for yucon with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from yucon import __version__
from yucon.commands import register_commands
from yucon.commands._base import YuconGroup
from yucon.commands._context import AppContext
from yucon.config.settings import YuconSettings


@click.group(
    cls=YuconGroup,
    invoke_without_command=True,
    fallback_command="convert",
    examples="""\
  yucon                          (interactive session)
  yucon 5 ft m
  yucon -l 1 2 3 in cm
  yucon --json convert 100 F C
  yucon -u ./my-units.cfg units --type volume""",
)
@click.version_option(version=__version__, prog_name="yucon")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-u",
    "--units",
    "units_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Units file to load instead of the discovered one.",
)
@click.option("-s", "--short", is_flag=True, help="Print converted values only.")
@click.option("-l", "--long", "long_format", is_flag=True, help="Print input and output.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    units_path: Path | None,
    short: bool,
    long_format: bool,
) -> None:
    """yucon — general purpose unit converter.

    Without a command, starts an interactive session.
    """
    format_override = "long" if long_format else "short" if short else None
    settings = YuconSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        units_path=units_path,
        format_override=format_override,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        from yucon.commands.repl import repl

        ctx.invoke(repl)


register_commands(cli)
