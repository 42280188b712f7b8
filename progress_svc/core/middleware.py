"""
Request logging middleware.

Each request is tagged with a short id that lives in the logging context
for the duration of the request and is returned to the client in the
X-Request-ID header, so a client-side report can be matched to log lines.
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from progress_svc.core.logging_config import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Probes and docs are polled constantly and not worth a log line each
QUIET_PATHS = frozenset({"/health", "/ready", "/docs", "/redoc", "/openapi.json"})


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request with status and duration.

    4xx/5xx responses are logged at WARNING; unhandled exceptions are logged
    with traceback and re-raised for the server to turn into a 500.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _new_request_id()
        set_request_id(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                extra={"method": request.method, "path": request.url.path, "request_id": request_id}
            )
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            clear_request_id()

        if request.url.path not in QUIET_PATHS:
            logger.log(
                logging.WARNING if response.status_code >= 400 else logging.INFO,
                "Request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "query": str(request.query_params) or None,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "request_id": request_id,
                }
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
