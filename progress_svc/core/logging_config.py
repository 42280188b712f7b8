"""
Logging setup for the Progress Chart Service.

Two output styles share one pipeline:

- ``json`` (default): one JSON object per line, for log shippers
- ``text``: aligned columns for a developer terminal

Every record passes through RequestIdFilter, which stamps it with the id of
the HTTP request being served (set by LoggingMiddleware), so log lines from
the repository, the chart pipeline and the router can be correlated.

Example JSON line:
    {"timestamp": "2024-01-15T10:30:00.123Z", "level": "INFO",
     "logger": "progress_svc.services.chart.chart_service",
     "message": "Chart snapshot built", "request_id": "1f3a9c2e",
     "extra": {"entries": 12, "records": 9}}

Modules log with ``logger = logging.getLogger(__name__)`` and pass context
through ``extra={...}``; setup_logging() is called once from the app lifespan.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("progress_svc_request_id", default=None)

# Attributes every LogRecord carries; anything else arrived via ``extra``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "request_id"}

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"
_TEXT_DATEFMT = "%H:%M:%S"

# Server loggers re-routed through the root handler so they share the format
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def get_request_id() -> Optional[str]:
    """Request id of the request being handled in this context, if any."""
    return _request_id.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def clear_request_id() -> None:
    _request_id.set(None)


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or "-") unless the caller passed one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """
    Render a record as a single line of JSON.

    Timestamps are UTC with millisecond precision. ``request_id`` is only
    present while a request is being served; fields passed via ``extra``
    are nested under ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{created.microsecond // 1000:03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or get_request_id()
        if request_id and request_id != "-":
            payload["request_id"] = request_id

        context = {
            name: value
            for name, value in vars(record).items()
            if name not in _RECORD_ATTRS and not name.startswith("_")
        }
        if context:
            payload["extra"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


def _build_handler(json_format: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt=_TEXT_DATEFMT))
    return handler


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Level name for the root and ``progress_svc`` loggers
        json_format: JSON lines when True, text columns when False
        include_uvicorn: Send uvicorn's own loggers through the same handler

    The ``LOG_LEVEL`` and ``LOG_FORMAT`` ("json"/"text") environment
    variables take precedence over the arguments.
    """
    level = os.environ.get("LOG_LEVEL", level).upper()
    fmt = os.environ.get("LOG_FORMAT", "json" if json_format else "text").lower()
    json_format = fmt == "json"

    root = logging.getLogger()
    root.handlers = [_build_handler(json_format)]
    root.setLevel(level)

    package_logger = logging.getLogger("progress_svc")
    package_logger.setLevel(level)
    package_logger.propagate = True

    if include_uvicorn:
        for name in _SERVER_LOGGERS:
            server_logger = logging.getLogger(name)
            server_logger.handlers = []
            server_logger.propagate = True

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
