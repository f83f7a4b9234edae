"""Structured JSON logging for StatusFlow.

Loggers live under the ``statusflow`` namespace. Structured fields are
passed through ``extra=`` and rendered as top-level keys of a single JSON
line by ``StructuredFormatter``.

Usage:
    >>> from statusflow.logging_config import configure_logging, get_logger
    >>> configure_logging()
    >>> get_logger("runtime").info("transition_confirmed", extra={"record_id": "inv_1"})
"""

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

__all__ = [
    "StructuredFormatter",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

_LOGGER_PREFIX = "statusflow"

_STDLIB_KEYS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Handle enums and datetimes in log payloads."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            # LifecycleError subclasses carry their structured fields in to_dict()
            to_dict = getattr(exc, "to_dict", None)
            if callable(to_dict):
                payload["exc_detail"] = to_dict()
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the statusflow namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Configure the statusflow logger hierarchy (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
