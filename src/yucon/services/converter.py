"""ConverterService — runs REPL lines and command-line conversions.

Pipeline for a conversion:
  interpret → to_conv_primitive → perform_recall → convert_all → update_recall

Every outcome, command or conversion, comes back as a ServiceResult.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from yucon import __version__
from yucon.domain.errors import ConvPrimitiveError, ExprSyntaxError, GrammarError, RecallError
from yucon.domain.expressions import check_complete, to_conv_primitive
from yucon.services import result as codes
from yucon.services.base import BaseService
from yucon.services.conversion import (
    Conversion,
    ConversionFormat,
    convert_all,
    render_conversion,
)
from yucon.services.interpreter import HELP_TEXT, Interpreter, Signal, SignalKind
from yucon.services.result import ServiceResult
from yucon.services.session import SessionState, perform_recall, update_recall
from yucon.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from yucon.infrastructure.database import UnitDatabase

logger = logging.getLogger(__name__)

_FAILURE_CODES = {
    SignalKind.UNRECOGNIZED_CMD: codes.UNRECOGNIZED_CMD,
    SignalKind.INVALID_STATE: codes.INVALID_STATE,
    SignalKind.INCOMPLETE: codes.INCOMPLETE,
}


class ConverterService(BaseService):
    """Stateful conversion session over a unit database."""

    def __init__(
        self,
        database: UnitDatabase,
        state: SessionState | None = None,
        *,
        format: ConversionFormat = ConversionFormat.DESC,
        precision: int = 15,
    ) -> None:
        super().__init__(database)
        self.state = state if state is not None else SessionState()
        self.interpreter = Interpreter(self.state, format=format, precision=precision)

    @property
    def format(self) -> ConversionFormat:
        return self.interpreter.format

    @property
    def precision(self) -> int:
        return self.interpreter.precision

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def execute(self, line: str) -> ServiceResult:
        """Interpret and run one REPL line."""
        try:
            args = self.interpreter.interpret(line)
        except Signal as signal:
            return self._from_signal(signal)
        except GrammarError as exc:
            return self._failure("convert", codes.SYNTAX, str(exc))
        return self._convert(args)

    @traced
    def execute_args(self, args: Sequence[str]) -> ServiceResult:
        """Run a conversion given as already-split arguments."""
        try:
            tokens = self.interpreter.interpret_args(args)
        except Signal as signal:
            return self._from_signal(signal)
        return self._convert(tokens)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _from_signal(self, signal: Signal) -> ServiceResult:
        op = signal.command or signal.kind.value
        code = _FAILURE_CODES.get(signal.kind)
        if code is not None:
            return self._failure(op, code, str(signal), detail={"token": signal.message})

        data: dict[str, Any] = {}
        match signal.kind:
            case SignalKind.CMD_SUCCESS:
                data["message"] = signal.message
            case SignalKind.HELP:
                data["message"] = HELP_TEXT
            case SignalKind.VERSION:
                data["message"] = f"yucon {__version__}"
        return ServiceResult(ok=True, op=op, data=data)

    def _convert(self, args: list[str]) -> ServiceResult:
        try:
            primitive = to_conv_primitive(args, complete=False)
            # recall first: "; ; cm" reports the unset value, not the missing target
            perform_recall(self.state, primitive)
            check_complete(primitive, len(args))
        except ConvPrimitiveError as exc:
            code = codes.SYNTAX if isinstance(exc.error, ExprSyntaxError) else codes.PARSE
            detail: dict[str, Any] = {"argument": exc.failed_at}
            if exc.failed_at < len(args):
                detail["token"] = args[exc.failed_at]
            return self._failure("convert", code, str(exc), detail=detail)
        except RecallError as exc:
            return self._failure("convert", codes.RECALL, str(exc), detail={"field": exc.field})

        with trace_span("convert_all") as span:
            conversions = convert_all(primitive, self._database)
            if span is not None:
                span.annotate("count", len(conversions))
        update_recall(self.state, conversions)
        return self._conversion_result(conversions)

    def _conversion_result(self, conversions: list[Conversion]) -> ServiceResult:
        lines = [render_conversion(c, self.format, self.precision) for c in conversions]
        data = {
            "conversions": [c.to_dict() for c in conversions],
            "lines": lines,
        }
        failed = [line for c, line in zip(conversions, lines, strict=True) if not c.ok]
        if failed:
            logger.debug("%d of %d conversions failed", len(failed), len(conversions))
            return self._failure(
                "convert",
                codes.CONVERSION,
                failed[0],
                detail={"failed": len(failed)},
                data=data,
            )
        return ServiceResult(ok=True, op="convert", data=data)
