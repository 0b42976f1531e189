"""structlog setup for the graphtoll CLI.

Log lines go to stderr so stdout carries only command results. The
console renderer is used by default and ``--log-json`` switches to JSON
lines. The acting principal, when known, is bound into every event.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Libraries that are chatty at DEBUG; graphtoll's own --verbose should not
# turn them on.
_QUIET_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool", "networkx")


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    principal: str | None = None,
) -> None:
    """Install the structlog pipeline and a single stderr handler.

    Args:
        verbose: Emit graphtoll's DEBUG and INFO events (state changes,
            refused debits, span timings). Otherwise only WARNING and up.
        log_json: Render JSON lines instead of the console format.
        principal: Identity to attach to every event as ``principal``.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("graphtoll").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if principal:
        structlog.contextvars.bind_contextvars(principal=principal)
