"""
Gap-aware polylines for sparse metric series.

A metric that was not logged on some day must not be drawn as if it had
been: the line stops at the last present value and a new segment starts at
the next one. Segments are also rendered as SVG path data, where each
segment begins with a move-to (``M``) and continues with draw-to (``L``).
"""

from typing import Callable, List, Sequence, Tuple

from progress_svc.services.chart.coordinate_mapper import CoordinateMapper
from progress_svc.services.chart.models import ChartRecord, Point, Segment, ValueDomain


def build_segments(
    records: Sequence[ChartRecord],
    field_name: str,
    x_of: Callable[[int], float],
    y_of: Callable[[float], float],
) -> Tuple[Segment, ...]:
    """
    Split one field's values into maximal runs of consecutive present records.

    Args:
        records: Chart records sorted by date
        field_name: ChartRecord field to trace
        x_of: Pixel x for a record index
        y_of: Pixel y for a value of this field

    Returns:
        One segment per run of present values; empty when the field never appears
    """
    segments: List[Segment] = []
    current: List[Point] = []

    for index, record in enumerate(records):
        value = record.value(field_name)
        if value is None:
            if current:
                segments.append(tuple(current))
                current = []
            continue
        current.append(Point(x=x_of(index), y=y_of(value)))

    if current:
        segments.append(tuple(current))
    return tuple(segments)


def build_metric_segments(
    records: Sequence[ChartRecord],
    field_name: str,
    mapper: CoordinateMapper,
    domain: ValueDomain,
) -> Tuple[Segment, ...]:
    """Segments for ``field_name`` scaled against ``domain``."""
    return build_segments(
        records,
        field_name,
        x_of=mapper.x,
        y_of=lambda value: mapper.y(value, domain),
    )


def format_coordinate(value: float) -> str:
    """Compact coordinate text: 50.0 -> "50", 123.456789 -> "123.457"."""
    text = f"{value:.3f}".rstrip('0').rstrip('.')
    return "0" if text == "-0" else text


def to_svg_path(segments: Sequence[Segment]) -> str:
    """SVG path data for the segments, e.g. ``"M 50 140 L 250 120 M 450 100"``."""
    commands: List[str] = []
    for segment in segments:
        for position, point in enumerate(segment):
            command = 'M' if position == 0 else 'L'
            commands.append(f"{command} {format_coordinate(point.x)} {format_coordinate(point.y)}")
    return " ".join(commands)
