"""BaseService — shared foundation for yucon services.

Every service receives the loaded :class:`UnitDatabase` at construction
time. The database is read-only, so services never need to coordinate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from yucon.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from yucon.infrastructure.database import UnitDatabase


class BaseService:
    """Base for the service-layer classes.

    Usage::

        class UnitsService(BaseService):
            def list_units(self, ...) -> ServiceResult:
                units = self._database.units
                ...
    """

    def __init__(self, database: UnitDatabase) -> None:
        self._database = database

    @property
    def database(self) -> UnitDatabase:
        return self._database

    @staticmethod
    def _failure(
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )
