"""Structured logging configuration for junit_annotator.

Logs go to stderr so that JSON or markdown results printed on stdout stay
machine readable. Events logged while a report file is being ingested carry
its path under ``report_file``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

# Report file currently being ingested, attached to every event logged for it
report_file_ctx: ContextVar[str] = ContextVar("report_file", default="")


def add_report_file(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add report_file to log event if set in context."""
    report_file = report_file_ctx.get()
    if report_file:
        event_dict.setdefault("report_file", report_file)
    return event_dict


@contextmanager
def report_file_context(path: str) -> Iterator[None]:
    """Attach ``path`` as ``report_file`` to events logged inside the block."""
    token = report_file_ctx.set(path)
    try:
        yield
    finally:
        report_file_ctx.reset(token)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging with structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON format; otherwise, console format.
        stream: Output stream (defaults to sys.stderr, keeping stdout for results).
    """
    if stream is None:
        stream = sys.stderr

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_report_file,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,  # Disable caching for tests
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically module name).

    Returns:
        Configured structlog BoundLogger.
    """
    # initial values keep the proxy lazy, so configure_logging() still applies;
    # "logger" itself is taken by wrap_logger()
    return structlog.get_logger(name, logger_name=name)
