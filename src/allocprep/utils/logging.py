"""
Structured logging for allocprep.

Library modules only log through ``get_logger(__name__)``; the CLI calls
``configure_logging`` once with the ``logging`` section of the project
config. Output goes to stderr by default so ``allocprep validate --json``
and ``allocprep rule`` can be piped.
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        level: Log level name, as validated by ``LoggingConfig``.
        json_output: Emit one JSON object per line instead of console text.
        stream: Where log lines go. Defaults to stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    out = stream if stream is not None else sys.stderr

    logging.basicConfig(format="%(message)s", stream=out, level=log_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=out.isatty())]

    structlog.configure(
        processors=[*shared_processors, *renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for one module, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind key-value pairs to every log line emitted inside the block.

    Example:
        with log_context(entity="workers"):
            log.debug("Normalized upload", rows=12)  # carries entity="workers"
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
