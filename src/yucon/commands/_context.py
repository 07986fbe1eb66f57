"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Loads the unit database lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from yucon.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from yucon.config.settings import YuconSettings
    from yucon.infrastructure.database import UnitDatabase
    from yucon.services.converter import ConverterService
    from yucon.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The units file is only read on first access to :attr:`database`, so
    ``--help``, ``--version`` and ``--examples`` never touch it.
    """

    def __init__(self, settings: YuconSettings) -> None:
        self.settings = settings
        self._database: UnitDatabase | None = None
        self._units_path: Path | None = None

        from yucon.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from yucon.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def units_path(self) -> Path:
        """The units.cfg this invocation uses (explicit, configured, or discovered)."""
        if self._units_path is None:
            from yucon.config.discovery import find_units_file

            self._units_path = find_units_file(self.settings.units_path, self.settings.units)
        return self._units_path

    def empty_database(self) -> UnitDatabase:
        """A database with this invocation's tag settings and no units."""
        from yucon.infrastructure.database import UnitDatabase

        return UnitDatabase(
            default_tag=self.settings.units.default_tag,
            preferred_tag=self.settings.units.preferred_tag,
        )

    @property
    def database(self) -> UnitDatabase:
        """The loaded unit database. Exits with code 1 if the file is missing."""
        if self._database is None:
            path = self.units_path
            if not path.is_file():
                from yucon.services.result import UNITS_NOT_FOUND, ServiceError, ServiceResult

                self.emit(
                    ServiceResult(
                        ok=False,
                        op="load_units",
                        error=ServiceError(
                            code=UNITS_NOT_FOUND,
                            message=f"Units file not found: {path}",
                            detail={"path": str(path)},
                        ),
                    )
                )

            from yucon.infrastructure.loader import load_units_file

            report = load_units_file(
                path,
                default_tag=self.settings.units.default_tag,
                preferred_tag=self.settings.units.preferred_tag,
            )
            if report.issues:
                logger.warning(
                    "%s: %d problem(s); run 'yucon check' for details", path, len(report.issues)
                )
            self._database = report.database
        return self._database

    def converter(self) -> ConverterService:
        """A fresh conversion session over :attr:`database`."""
        from yucon.services.conversion import ConversionFormat
        from yucon.services.converter import ConverterService

        return ConverterService(
            self.database,
            format=ConversionFormat(self.settings.conversion_format),
            precision=self.settings.output.precision,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr and exits with code 1.
        """
        if self.show(result):
            return
        raise SystemExit(1)

    def show(self, result: ServiceResult) -> bool:
        """Output *result* like :meth:`emit` but never exit. Returns ``result.ok``.

        Used by the REPL, where a failed line must not end the session.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        elif output:
            click.echo(output, err=True)
        return result.ok
