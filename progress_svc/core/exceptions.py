"""
Error types raised by the progress chart service and their HTTP mapping.

Every domain error carries its own status code, so routers simply raise and
the handler registered by setup_exception_handlers() turns the error into
``{"detail": ..., "context": {...}}``.

A malformed stored log never reaches a client as an error: the repository
reads it as an empty list and logs a warning. MalformedSourceDataError only
surfaces (as 422) when a client tries to write invalid entries.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ProgressServiceError(Exception):
    """Base class; subclasses override ``status_code`` and ``detail``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None, **context: Any):
        """
        Args:
            detail: Message for the client; falls back to the class default.
            status_code: Overrides the class status code.
            **context: Extra fields echoed back under ``context``.
        """
        self.detail = detail or type(self).detail
        self.status_code = status_code or type(self).status_code
        self.context = context
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.detail}
        if self.context:
            body["context"] = self.context
        return body


class InvalidViewportError(ProgressServiceError):
    """Margins are at least as large as the viewport in one dimension."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Viewport margins leave no plot area"


class UnknownMetricLogError(ProgressServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Unknown metric log"

    def __init__(self, key: Optional[str] = None, **context: Any):
        super().__init__(
            detail=f"Unknown metric log '{key}'" if key else None,
            key=key,
            **context
        )


class MalformedSourceDataError(ProgressServiceError):
    """A metric log payload is not valid JSON or its entries fail validation."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Metric log data is malformed"

    def __init__(self, key: Optional[str] = None, reason: Optional[str] = None, **context: Any):
        super().__init__(
            detail=f"Metric log '{key}' is malformed" if key else None,
            key=key,
            reason=reason,
            **context
        )


class DatabaseError(ProgressServiceError):
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **context: Any):
        super().__init__(
            detail=f"Database error during {operation}" if operation else None,
            operation=operation,
            **context
        )


async def handle_service_error(request: Request, exc: ProgressServiceError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "Request rejected: %s",
        exc.detail,
        extra={
            "error": type(exc).__name__,
            "status_code": exc.status_code,
            "method": request.method,
            "path": request.url.path,
            "context": exc.context,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def setup_exception_handlers(app: FastAPI) -> None:
    """Route every ProgressServiceError through handle_service_error."""
    app.add_exception_handler(ProgressServiceError, handle_service_error)
