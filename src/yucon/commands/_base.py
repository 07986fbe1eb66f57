"""Custom Click base classes with --examples support.

``YuconCommand`` and ``YuconGroup`` accept an ``examples`` parameter; passing
``--examples`` prints them and exits, which keeps ``--help`` short.

``YuconGroup`` can also name a ``fallback_command`` that receives the
whole argument list when the first argument is not a known subcommand,
so ``yucon 5 ft m`` behaves like ``yucon convert 5 ft m``.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class YuconCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class YuconGroup(click.Group):
    """Click Group subclass with ``--examples`` and an optional fallback command."""

    command_class = YuconCommand

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        fallback_command: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.fallback_command = fallback_command
        if examples:
            _add_examples_option(self, examples)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if self.fallback_command and args and args[0] not in self.commands:
            fallback = self.get_command(ctx, self.fallback_command)
            if fallback is not None:
                return fallback.name, fallback, args
        return super().resolve_command(ctx, args)
