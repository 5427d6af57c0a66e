"""
Structured logging for the representer layer.

Loggers from ``get_logger`` are structlog loggers sitting on top of standard
library loggers, so the host application's logging setup decides what is
shown.  Nothing is printed until a handler accepts the record; with an
unconfigured ``logging`` the library's debug events are dropped.

Applications and the CLI that want ready-made output opt in with
``configure_logging()``, which attaches one handler to the ``representers``
logger (or another logger name) rendering console or JSON lines:

    >>> from representers.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> get_logger("representers.app").debug("representer_rendered", template="representers/book/show")

Context (request_id, representer) is carried through ``contextvars``:

    >>> with LogContext(request_id="abc123"):
    ...     logger.info("render_started")

Tags:
    logging, structlog, representers

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import Processor

ROOT_LOGGER = "representers"

_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.dev.set_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


class _RepresentersHandler(logging.StreamHandler):
    """Handler installed by ``configure_logging``; replaced on reconfiguration."""


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structured logger backed by ``logging.getLogger(name)``."""
    return structlog.wrap_logger(
        logging.getLogger(name or ROOT_LOGGER),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    add_timestamp: bool = True,
    logger_name: str = ROOT_LOGGER,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Send ``logger_name`` records to ``stream`` as console or JSON lines.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        add_timestamp: Include ISO timestamp in logs
        logger_name: Logger to configure; ``""`` configures the root logger
        stream: Output stream, stdout by default

    Returns the configured standard library logger.
    """
    stream = stream or sys.stdout
    if json_format is None:
        json_format = not stream.isatty()

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=stream.isatty())
    )
    processors: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(renderer)

    handler = _RepresentersHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=processors,
            foreign_pre_chain=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
            ],
        )
    )

    target = logging.getLogger(logger_name)
    for existing in list(target.handlers):
        if isinstance(existing, _RepresentersHandler):
            target.removeHandler(existing)
    target.addHandler(handler)
    target.setLevel(getattr(logging, level.upper()))
    if logger_name:
        target.propagate = False
    return target


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind logging context for the duration of a ``with`` block.

    Example:
        with LogContext(request_id="abc123", representer="BookRepresenter"):
            logger.info("render_started")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
