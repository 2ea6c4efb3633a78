"""structlog configuration for guardtype.

Only the ``guardtype`` logger tree is configured; the root logger is left to
the application that embeds the generator. Records are rendered on stderr as
colored console lines, or as JSON lines with ``--log-json``.

The dispatcher binds ``newtype`` and ``source`` with
:func:`structlog.contextvars.bound_contextvars` while it expands a
declaration, so every pipeline record names the type it belongs to.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "guardtype"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route ``guardtype`` records through structlog to stderr.

    Args:
        verbose: Emit pipeline DEBUG records. When False, only WARNING+.
        log_json: One JSON object per record instead of console lines.

    Calling it again replaces the previous handler.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
