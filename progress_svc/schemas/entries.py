"""
Pydantic models for the raw metric log entries kept in the store.

Each of the five metric logs is a JSON list stored under a fixed key.
Entries keep the camelCase keys the client writes (``totalIntake``,
``targetCalories``); unrelated keys such as ``loggedMeals`` or
``startTime`` are ignored. Models are frozen so source lists can be
hashed for snapshot memoization.
"""
import datetime
from typing import Dict, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field


class MetricEntry(BaseModel):
    """Common base: one calendar-day entry of a metric log."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    date: datetime.date = Field(..., description="Calendar day (YYYY-MM-DD)", examples=["2024-01-01"])


class ProgressEntry(MetricEntry):
    """Body weight and BMI measured on the same day."""

    weight: float = Field(..., description="Body weight in kg", examples=[80.0])
    bmi: float = Field(..., description="Body mass index", examples=[26.1])


class DailyIntake(MetricEntry):
    """Calories eaten on a day next to that day's calorie target."""

    total_intake: float = Field(..., alias="totalIntake", description="Calories eaten", examples=[1850])
    target_calories: float = Field(..., alias="targetCalories", description="Calorie target", examples=[1800])


class SleepEntry(MetricEntry):
    hours: float = Field(..., description="Hours slept", examples=[7.5])


class FastingEntry(MetricEntry):
    duration: float = Field(..., description="Fasting window in hours", examples=[16])


class WaterEntry(MetricEntry):
    glasses: float = Field(..., description="Glasses of water", examples=[8])


# =============================================================================
# METRIC LOG KEYS
# =============================================================================

PROGRESS_LOG = "progress"
DAILY_INTAKE_LOG = "daily_intake"
SLEEP_LOG = "sleep"
FASTING_LOG = "fasting"
WATER_LOG = "water"

# Fixed store keys and the entry model each key holds
ENTRY_MODELS: Dict[str, Type[MetricEntry]] = {
    PROGRESS_LOG: ProgressEntry,
    DAILY_INTAKE_LOG: DailyIntake,
    SLEEP_LOG: SleepEntry,
    FASTING_LOG: FastingEntry,
    WATER_LOG: WaterEntry,
}

METRIC_LOG_KEYS: Tuple[str, ...] = tuple(ENTRY_MODELS)
