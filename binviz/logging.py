"""
    Structured logging for binviz.

    Everything logs through structlog on top of the standard ``logging`` module,
    so the CLI can switch between a coloured console and JSON lines with one call
    to ``configure_logging``.
"""
from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog
from structlog.contextvars import bound_contextvars

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    add_timestamp: bool = True,
    colorize: Optional[bool] = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    level - DEBUG, INFO, WARNING or ERROR
    json_output - render one JSON object per line instead of console text
    colorize - colour console output (auto-detected from the terminal if None)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    if colorize is None:
        colorize = sys.stderr.isatty() and not json_output

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name)


class LogContext:
    """Bind context variables (source=..., mode=...) for the duration of a block."""

    def __init__(self, **kwargs):
        self.context = kwargs
        self._bound = None

    def __enter__(self):
        # restores whatever an enclosing block had bound under the same keys
        self._bound = bound_contextvars(**self.context)
        self._bound.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._bound.__exit__(exc_type, exc_val, exc_tb)
        self._bound = None


@contextmanager
def timed(operation: str, level: str = "info", **context) -> Iterator[None]:
    """
    Log a ``start`` and an ``end`` event around a block, the end event carrying
    the elapsed wall time in seconds.
    """
    logger = get_logger("binviz.timing")
    emit = getattr(logger, level)
    with LogContext(operation=operation, **context):
        emit("start")
        started = time.perf_counter()
        try:
            yield
        finally:
            emit("end", elapsed=round(time.perf_counter() - started, 6))
