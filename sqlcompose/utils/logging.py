"""Logging helpers for sqlcompose.

Every module logs through :func:`get_logger`, which places its logger under
the ``sqlcompose`` namespace and tags records with the correlation ID of the
current context. :class:`StructuredFormatter` renders records as JSON lines.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any

import msgspec

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlcompose"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("sqlcompose_correlation_id", default=None)
_encode_json = msgspec.json.Encoder(enc_hook=repr).encode


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag log records emitted in the current context with ``correlation_id`` (``None`` clears it)."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


class CorrelationIDFilter(logging.Filter):
    """Copies the context's correlation ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            record.correlation_id = correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Fields passed as ``extra={"extra_fields": {...}}`` (see
    :func:`log_with_context`) are merged into the top level of the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id is not None:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return _encode_json(entry).decode()


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ``sqlcompose`` logger, or the child logger ``sqlcompose.<name>``."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(existing, CorrelationIDFilter) for existing in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(level: str = "INFO", format_style: str = "structured") -> logging.Handler:
    """Send ``sqlcompose`` records to stdout.

    Args:
        level: Level name for the ``sqlcompose`` logger.
        format_style: ``"structured"`` for JSON lines, anything else for plain text.

    Returns:
        The installed handler, replacing any handler installed by an earlier call.
    """
    root = get_logger()
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(_PLAIN_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    log_with_context(root, logging.INFO, "sqlcompose logging configured", log_level=level, format_style=format_style)
    return handler


def log_with_context(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached as structured data."""
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_fields": fields}, stacklevel=2)
