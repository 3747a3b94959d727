"""Structured JSON logging for the API process."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import get_request_id, get_user_id

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "taskName",
}
_CONTEXT_ATTRS = frozenset({"request_id", "user_id"})

# Third-party loggers routed through our handler instead of their own.
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_QUIET_LOGGERS = ("pymongo",)


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except TypeError:
        return str(value)
    return value


class JsonLogFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    ``defaults`` are written first so per-record fields win on collision.
    """

    def __init__(self, *, defaults: dict[str, Any] | None = None, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self._defaults = dict(defaults or {})

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            **self._defaults,
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None) or "-",
        }
        if user_id := getattr(record, "user_id", None):
            entry["user_id"] = user_id

        extras = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in _CONTEXT_ATTRS
        }
        for key, value in extras.items():
            entry.setdefault(key, value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp the bound request id and user id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        record.user_id = get_user_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Send all logs as JSON lines to stdout at ``settings.log_level``."""

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.captureWarnings(True)

    loggers: dict[str, dict[str, Any]] = {"": {"handlers": ["stdout"], "level": level}}
    for name in _SERVER_LOGGERS:
        loggers[name] = {"handlers": ["stdout"], "level": level, "propagate": False}
    for name in _QUIET_LOGGERS:
        loggers[name] = {"handlers": ["stdout"], "level": max(level, logging.WARNING), "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "defaults": {"service": settings.project_name, "environment": settings.environment},
                }
            },
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "level": level,
                    "filters": ["request_context"],
                }
            },
            "loggers": loggers,
        }
    )
