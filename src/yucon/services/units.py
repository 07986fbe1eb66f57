"""UnitsService — listing loaded units and linting units.cfg files."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from yucon.domain.units import Unit
from yucon.infrastructure.loader import load_units_file
from yucon.services import result as codes
from yucon.services.base import BaseService
from yucon.services.result import ServiceResult
from yucon.services.telemetry import traced

logger = logging.getLogger(__name__)


def unit_to_dict(unit: Unit) -> dict[str, Any]:
    return {
        "name": unit.name,
        "type": unit.unit_type,
        "conv_factor": unit.conv_factor,
        "zero_point": unit.zero_point,
        "dimensions": unit.dimensions,
        "inverse": unit.inverse,
        "aliases": sorted(unit.aliases),
        "tags": sorted(unit.tags),
    }


class UnitsService(BaseService):
    """Read-only views over the unit database."""

    @traced
    def list_units(self, tag: str | None = None, unit_type: str | None = None) -> ServiceResult:
        """List units, optionally restricted to one tag and/or one type."""
        db = self._database
        units = db.units_in(tag) if tag is not None else list(db.units)
        if unit_type is not None:
            units = [u for u in units if u.unit_type == unit_type]

        warnings: list[str] = []
        if not units:
            filters = [f"tag '{tag}'" if tag else "", f"type '{unit_type}'" if unit_type else ""]
            described = " and ".join(f for f in filters if f)
            warnings.append(f"No units match {described}" if described else "No units loaded")

        return ServiceResult(
            ok=True,
            op="list_units",
            data={
                "units": [unit_to_dict(u) for u in units],
                "count": len(units),
                "tags": db.tags(),
            },
            warnings=warnings,
        )

    @traced
    def check(self, path: Path) -> ServiceResult:
        """Load *path* on its own and report every problem found.

        ``ok`` is False when the file has any issue, warnings included.
        Tag settings are taken from the current database.
        """
        if not path.is_file():
            return self._failure(
                "check",
                codes.UNITS_NOT_FOUND,
                f"Units file not found: {path}",
                detail={"path": str(path)},
            )

        report = load_units_file(
            path,
            default_tag=self._database.default_tag,
            preferred_tag=self._database.preferred_tag,
        )
        data = {
            "path": str(path),
            "units": len(report.database),
            "tags": report.database.tags(),
            "issues": [asdict(issue) for issue in report.issues],
        }
        if report.ok:
            return ServiceResult(ok=True, op="check", data=data)

        logger.info("%s: %d issue(s)", path, len(report.issues))
        return self._failure(
            "check",
            codes.PARSE,
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s) in {path}",
            detail={"errors": len(report.errors), "warnings": len(report.warnings)},
            data=data,
        )
