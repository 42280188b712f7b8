"""
Operational endpoints: liveness, readiness and a small index at ``/``.

``/health`` answers as long as the process is up. ``/ready`` also opens the
SQLite store and reads the metric log table; it answers 503 when that fails
so an orchestrator can hold traffic back.
"""
import logging
import sqlite3
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from progress_svc import __version__
from progress_svc.core.dependencies import get_database
from progress_svc.repositories.base import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])


class HealthResponse(BaseModel):
    status: str = Field(..., examples=["healthy"])
    version: str
    timestamp: str = Field(..., description="UTC, ISO 8601")


class DependencyStatus(BaseModel):
    name: str
    status: str = Field(..., description="'ok' or 'unavailable'")
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    status: str = Field(..., description="'ready' or 'not_ready'")
    dependencies: List[DependencyStatus]
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _probe_store(db: Database) -> DependencyStatus:
    """Time a one-row read against the metric log table."""
    started = time.perf_counter()
    error: Optional[sqlite3.Error] = None

    conn = None
    try:
        conn = db.get_connection()
        conn.execute("SELECT 1 FROM metric_logs LIMIT 1").fetchall()
    except sqlite3.Error as e:
        error = e
    finally:
        if conn is not None:
            conn.close()

    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    if error is None:
        return DependencyStatus(name="database", status="ok", latency_ms=latency_ms)

    logger.error(
        "Metric log store unreachable",
        extra={"db_path": db.db_path, "error": str(error)}
    )
    return DependencyStatus(
        name="database",
        status="unavailable",
        latency_ms=latency_ms,
        message=type(error).__name__
    )


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__, timestamp=_now())


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Reports 503 while the metric log store cannot be read."
)
async def readiness_check(response: Response, db: Database = Depends(get_database)) -> ReadyResponse:
    checks = [_probe_store(db)]
    ready = all(check.status == "ok" for check in checks)
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadyResponse(
        status="ready" if ready else "not_ready",
        dependencies=checks,
        timestamp=_now()
    )


@router.get("/", summary="Service index")
async def root() -> Dict[str, Any]:
    return {
        "service": "Progress Chart Service",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "ready": "/ready",
            "logs": "/api/v1/logs/{key}",
            "records": "/api/v1/chart/records",
            "render": "/api/v1/chart/render",
            "pointer": "/api/v1/chart/pointer",
            "html_view": "/api/v1/chart/html-view",
        },
    }
