"""
Pydantic schemas for stored metric logs and API responses.

Note: the chart response models are not re-exported here because they
depend on the chart package, which itself imports the entry models.
Import them directly:
- from progress_svc.schemas.chart import RenderResponse
"""
from progress_svc.schemas.entries import (
    DAILY_INTAKE_LOG,
    ENTRY_MODELS,
    FASTING_LOG,
    METRIC_LOG_KEYS,
    PROGRESS_LOG,
    SLEEP_LOG,
    WATER_LOG,
    DailyIntake,
    FastingEntry,
    MetricEntry,
    ProgressEntry,
    SleepEntry,
    WaterEntry,
)

__all__ = [
    # Entry models
    "MetricEntry",
    "ProgressEntry",
    "DailyIntake",
    "SleepEntry",
    "FastingEntry",
    "WaterEntry",
    # Log keys
    "PROGRESS_LOG",
    "DAILY_INTAKE_LOG",
    "SLEEP_LOG",
    "FASTING_LOG",
    "WATER_LOG",
    "ENTRY_MODELS",
    "METRIC_LOG_KEYS",
]
