"""
Merge the independently dated metric logs into one sparse, date-indexed series.

Each log contributes only its own fields to the record of an entry's day.
Logs are merged in MERGE_ORDER; when the same day appears twice within one
log, the later entry overwrites that log's fields (last write wins per field,
never per record). The result is sorted by calendar day with one record per
day.
"""

import datetime
import logging
from typing import Dict, Tuple

from progress_svc.core.metric_registry import metrics_for_source
from progress_svc.schemas.entries import (
    DAILY_INTAKE_LOG,
    FASTING_LOG,
    PROGRESS_LOG,
    SLEEP_LOG,
    WATER_LOG,
)
from progress_svc.services.chart.models import ChartRecord, SourceLogs

logger = logging.getLogger(__name__)

# Precedence when two logs contribute the same field: later wins
MERGE_ORDER: Tuple[str, ...] = (
    PROGRESS_LOG,
    DAILY_INTAKE_LOG,
    SLEEP_LOG,
    FASTING_LOG,
    WATER_LOG,
)


def merge_chart_records(sources: SourceLogs) -> Tuple[ChartRecord, ...]:
    """
    Merge all metric logs into chart records sorted by day.

    Args:
        sources: The five metric logs in insertion order

    Returns:
        Records strictly ascending by date, at most one per date
    """
    combined: Dict[datetime.date, Dict[str, float]] = {}

    for source in MERGE_ORDER:
        contributions = metrics_for_source(source)
        for entry in sources.entries(source):
            row = combined.setdefault(entry.date, {})
            for metric in contributions:
                row[metric.field] = getattr(entry, metric.source_field)

    records = tuple(
        ChartRecord(date=day.isoformat(), **values)
        for day, values in sorted(combined.items())
    )

    logger.debug(
        "Merged metric logs",
        extra={'entries': sources.total_entries(), 'records': len(records)}
    )
    return records
