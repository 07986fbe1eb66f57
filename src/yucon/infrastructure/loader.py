"""units.cfg loader — groups property lines into units and fills a database.

Errors are per line: a malformed line is reported and skipped, a unit that
is incomplete or collides with an earlier one is reported and dropped, and
loading always runs to the end of the file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from yucon.domain.errors import PropertyError, UnitCollisionError
from yucon.domain.properties import (
    Aliases,
    CommonName,
    ConvFactor,
    Dimensions,
    Inverse,
    PropertySyntax,
    Tags,
    UnitProperty,
    UnitType,
    ZeroPoint,
    parse_property_line,
)
from yucon.domain.units import UnitBuilder
from yucon.infrastructure.database import DEFAULT_TAG, PREFERRED_TAG, UnitDatabase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadIssue:
    """One problem found while loading. ``line_no`` is 1-based."""

    line_no: int
    line: str
    message: str
    severity: str = "error"


@dataclass
class LoadReport:
    database: UnitDatabase
    issues: list[LoadIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[LoadIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[LoadIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.issues


class _Loader:
    def __init__(self, database: UnitDatabase) -> None:
        self.database = database
        self.issues: list[LoadIssue] = []
        self.builder: UnitBuilder | None = None
        self.header_line = (0, "")

    def report(self, line_no: int, line: str, message: str, severity: str = "error") -> None:
        self.issues.append(LoadIssue(line_no, line, message, severity))
        log = logger.warning if severity == "warning" else logger.error
        log("units.cfg line %d: %s", line_no, message)

    def flush(self) -> None:
        builder = self.builder
        if builder is None:
            return
        line_no, line = self.header_line
        missing = builder.missing()
        if missing:
            self.report(
                line_no,
                line,
                f"failed to add unit {builder.name}: missing mandatory properties: "
                + ", ".join(missing),
            )
            return
        try:
            self.database.add(builder.build())
        except UnitCollisionError as exc:
            self.report(line_no, line, f"failed to add unit {builder.name}: {exc}")
        except ValueError as exc:
            self.report(line_no, line, f"failed to add unit {builder.name}: {exc}")

    def apply(self, line_no: int, line: str, prop: UnitProperty) -> None:
        if isinstance(prop, CommonName):
            self.flush()
            self.builder = UnitBuilder()
            self.builder.set_name(prop.name)
            self.header_line = (line_no, line)
            return

        builder = self.builder
        if builder is None:
            self.report(line_no, line, "property appears before any [unit] header")
            return

        match prop:
            case Aliases(values=values):
                taken, name = builder.set_aliases(list(values)), "aliases"
            case Tags(values=values):
                taken, name = builder.set_tags(list(values)), "tags"
            case UnitType(value=value):
                taken, name = builder.set_unit_type(value), "type"
            case ConvFactor(value=value):
                taken, name = builder.set_conv_factor(value), "conv_factor"
            case ZeroPoint(value=value):
                taken, name = builder.set_zero_point(value), "zero_point"
            case Dimensions(value=value):
                taken, name = builder.set_dimensions(value), "dimensions"
            case Inverse(value=value):
                taken, name = builder.set_inverse(value), "inverse"

        if not taken:
            self.report(
                line_no,
                line,
                f"for unit {builder.name}: attempted to assign {name} twice; ignoring",
                severity="warning",
            )


def load_units(
    lines: Iterable[str],
    *,
    default_tag: str = DEFAULT_TAG,
    preferred_tag: str = PREFERRED_TAG,
) -> LoadReport:
    """Build a :class:`UnitDatabase` from units.cfg lines."""
    loader = _Loader(UnitDatabase(default_tag=default_tag, preferred_tag=preferred_tag))
    syntax = PropertySyntax()

    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        try:
            prop = parse_property_line(line, syntax)
        except PropertyError as exc:
            loader.report(line_no, line, str(exc))
            continue
        if prop is not None:
            loader.apply(line_no, line, prop)

    # the last unit has no following header to trigger it
    loader.flush()

    logger.debug(
        "Loaded %d units in %d namespaces (%d issues)",
        len(loader.database),
        len(loader.database.tags()),
        len(loader.issues),
    )
    return LoadReport(loader.database, loader.issues)


def load_units_file(
    path: Path,
    *,
    default_tag: str = DEFAULT_TAG,
    preferred_tag: str = PREFERRED_TAG,
) -> LoadReport:
    """Read *path* as UTF-8 and load it with :func:`load_units`."""
    with path.open(encoding="utf-8") as fh:
        return load_units(fh, default_tag=default_tag, preferred_tag=preferred_tag)
