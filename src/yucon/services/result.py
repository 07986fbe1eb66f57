"""ServiceResult and ServiceError — what every service operation returns.

INVARIANT: services never print. The CLI renders a ServiceResult through
``yucon.output`` and decides the exit code from ``ok``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"convert"``, ``"format"``, ``"check"`` ...).
        data: Operation-specific payload. Conversions keep their rendered
            lines here even when ``ok`` is False.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing spans when verbose).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


# Error codes
SYNTAX = "SYNTAX"
PARSE = "PARSE"
RECALL = "RECALL"
INCOMPLETE = "INCOMPLETE"
UNRECOGNIZED_CMD = "UNRECOGNIZED_CMD"
INVALID_STATE = "INVALID_STATE"
CONVERSION = "CONVERSION"
UNITS_NOT_FOUND = "UNITS_NOT_FOUND"
