"""
Metric logs router - read and replace the five stored metric logs.

Each log is addressed by its fixed key (progress, daily_intake, sleep,
fasting, water). A PUT replaces the whole list, mirroring how the client
persists a log.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Path

from progress_svc.core.dependencies import get_progress_service
from progress_svc.schemas.chart import MetricLogResponse
from progress_svc.services.progress_service import ProgressService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/logs",
    tags=["Metric Logs"],
)

_KEY_DESCRIPTION = "Metric log key: progress, daily_intake, sleep, fasting or water"


@router.get(
    "/{key}",
    response_model=MetricLogResponse,
    summary="Get a metric log",
    description="Parsed entries of one metric log. Missing or malformed stored data reads as an empty list."
)
async def get_log(
    key: str = Path(..., description=_KEY_DESCRIPTION, examples=["progress"]),
    progress_service: ProgressService = Depends(get_progress_service)
):
    """
    Raises:
    - 404 Not Found: If key is not a metric log (UnknownMetricLogError)
    """
    entries = progress_service.get_log(key)
    return MetricLogResponse(
        key=key,
        entries=[entry.model_dump(mode="json", by_alias=True) for entry in entries]
    )


@router.put(
    "/{key}",
    response_model=MetricLogResponse,
    summary="Replace a metric log",
    description="Validate and store the complete list of entries for one metric log."
)
async def replace_log(
    key: str = Path(..., description=_KEY_DESCRIPTION, examples=["progress"]),
    entries: List[Dict[str, Any]] = Body(
        ...,
        examples=[[{"date": "2024-01-01", "weight": 80.0, "bmi": 26.1}]],
    ),
    progress_service: ProgressService = Depends(get_progress_service)
):
    """
    Raises:
    - 404 Not Found: If key is not a metric log (UnknownMetricLogError)
    - 422 Unprocessable Entity: If an entry does not match the log (MalformedSourceDataError)
    """
    saved = progress_service.replace_log(key, entries)
    logger.info("Metric log updated via API", extra={"log_key": key, "entries": len(saved)})
    return MetricLogResponse(
        key=key,
        entries=[entry.model_dump(mode="json", by_alias=True) for entry in saved]
    )
