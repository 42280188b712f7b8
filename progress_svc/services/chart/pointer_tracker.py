"""
Pointer-to-record lookup for tooltips.

The pointer position arrives already translated into plot-local pixels;
translating device or screen coordinates is the host surface's job. Each
query is independent of any earlier pointer position.
"""

import datetime
import logging
from typing import Optional, Sequence

from progress_svc.core.metric_registry import format_metric_value, list_metrics
from progress_svc.services.chart.coordinate_mapper import CoordinateMapper
from progress_svc.services.chart.models import (
    ChartRecord,
    PointerHit,
    Point,
    Tooltip,
    TooltipLine,
    ValueDomain,
)

logger = logging.getLogger(__name__)


def locate_record(
    pointer_x: float,
    records: Sequence[ChartRecord],
    mapper: CoordinateMapper,
    weight_domain: ValueDomain,
) -> Optional[PointerHit]:
    """
    Find the record nearest to ``pointer_x`` and its tooltip anchor.

    Out-of-range pointers clamp to the first or last record. The anchor sits
    on the record's weight point when weight was logged that day, otherwise
    at the vertical centre of the viewport.

    Returns:
        PointerHit, or None when there are no records
    """
    if not records:
        return None

    index = mapper.index_at(pointer_x)
    record = records[index]

    if record.weight is not None:
        anchor_y = mapper.y(record.weight, weight_domain)
    else:
        anchor_y = mapper.viewport.height / 2

    return PointerHit(index=index, record=record, anchor=Point(x=mapper.x(index), y=anchor_y))


def format_day(value: str, weekday: bool = False) -> str:
    """Day label: "1 Jan", or "Mon 1 Jan" with ``weekday``."""
    day = datetime.date.fromisoformat(value)
    label = f"{day.day} {day.strftime('%b')}"
    if weekday:
        return f"{day.strftime('%a')} {label}"
    return label


def build_tooltip(record: ChartRecord) -> Tooltip:
    """Tooltip title and one line per logged metric, in registry order."""
    lines = []
    for metric in list_metrics():
        value = record.value(metric.field)
        if value is None:
            continue
        text = format_metric_value(value)
        if metric.unit:
            text = f"{text} {metric.unit}"
        lines.append(TooltipLine(label=metric.display_name, value=text, color=metric.color))
    return Tooltip(title=format_day(record.date, weekday=True), lines=tuple(lines))
