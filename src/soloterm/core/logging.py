"""Structured logging configuration for SoloTerm.

The terminal UI owns stdout, so structlog writes to stderr, or to a log
file when one is configured. Output is human-readable in development and
JSON in production.

Example:
    >>> from soloterm.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Attribute reordered", character_id=3, attribute_id=12)
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Open log file, kept so reconfiguring does not leak handles.
_log_stream: TextIO | None = None


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the application name."""
    event_dict["app"] = "soloterm"
    return event_dict


def _open_stream(log_file: str | None) -> TextIO:
    global _log_stream

    if _log_stream is not None:
        _log_stream.close()
        _log_stream = None

    if not log_file:
        return sys.stderr

    _log_stream = open(log_file, "a", encoding="utf-8")  # noqa: SIM115
    return _log_stream


def _renderer(json_format: bool, stream: TextIO) -> list[Processor]:
    if json_format:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=stream.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure application-wide logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output logs in JSON format.
        log_file: Append log output to this file instead of stderr.

    Example:
        >>> configure_logging(level="DEBUG", log_file="/tmp/soloterm.log")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    stream = _open_stream(log_file)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(json_format, stream),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )

    # Standard library logging for anything that doesn't use structlog
    logging.basicConfig(
        format=_STDLIB_FORMAT,
        level=numeric_level,
        stream=stream,
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional name for the logger (typically __name__).

    Returns:
        A configured structlog BoundLogger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> AbstractContextManager[None]:
    """Add context variables to every log entry made inside a ``with`` block.

    Whatever was bound before the block is restored when it exits.

    Example:
        >>> with bind_context(character_id=7):
        ...     logger.info("Sheet loaded")  # Will include character_id
    """
    return structlog.contextvars.bound_contextvars(**kwargs)


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
]
