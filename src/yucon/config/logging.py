"""structlog configuration for yucon.

Everything goes to stderr so conversions on stdout stay pipeable:
- Human (default): console renderer, colored on a TTY
- JSON (--log-json): one JSON object per line

Levels for the ``yucon`` logger tree: DEBUG with ``--verbose``, ERROR with
``--quiet`` (units.cfg warnings are hidden), WARNING otherwise.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

YUCON_LOGGER = "yucon"


def level_for(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route stdlib and structlog records through one stderr handler.

    Safe to call repeatedly; the root handler is replaced each time.

    Args:
        verbose: Emit DEBUG records from yucon modules.
        quiet: Only emit ERROR and above. Ignored when *verbose* is set.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Destination, ``sys.stderr`` by default.
    """
    out = stream if stream is not None else sys.stderr

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(YUCON_LOGGER).setLevel(level_for(verbose=verbose, quiet=quiet))
