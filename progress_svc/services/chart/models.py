"""
Normalized, immutable data structures for the progress chart.

Everything here is a pure value: the aggregator, domain calculator, path
builder and pointer tracker produce new instances and never mutate them,
so a snapshot can be shared between renders and pointer queries.
"""

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from progress_svc.core.exceptions import InvalidViewportError
from progress_svc.schemas.entries import (
    DailyIntake,
    FastingEntry,
    MetricEntry,
    ProgressEntry,
    SleepEntry,
    WaterEntry,
)


# =============================================================================
# SOURCE LOGS
# =============================================================================

@dataclass(frozen=True)
class SourceLogs:
    """
    The five metric logs as read from the store, in insertion order.

    Hashable (tuples of frozen models) so it can key the snapshot cache.
    Attribute names match the store keys.
    """
    progress: Tuple[ProgressEntry, ...] = ()
    daily_intake: Tuple[DailyIntake, ...] = ()
    sleep: Tuple[SleepEntry, ...] = ()
    fasting: Tuple[FastingEntry, ...] = ()
    water: Tuple[WaterEntry, ...] = ()

    def entries(self, key: str) -> Tuple[MetricEntry, ...]:
        """Entries of the log stored under ``key``."""
        return getattr(self, key)

    def total_entries(self) -> int:
        return sum(len(getattr(self, f.name)) for f in fields(self))


# =============================================================================
# CHART RECORDS & DOMAINS
# =============================================================================

@dataclass(frozen=True)
class ChartRecord:
    """
    All metric values logged for one calendar day.

    Every metric field is independently optional; ``None`` means the metric
    was not logged that day (a gap), which is different from a logged zero.
    """
    date: str
    weight: Optional[float] = None
    bmi: Optional[float] = None
    intake: Optional[float] = None
    target: Optional[float] = None
    sleep: Optional[float] = None
    fasting_duration: Optional[float] = None
    water: Optional[float] = None

    def value(self, field_name: str) -> Optional[float]:
        """Value of a metric field, or None when absent."""
        if field_name not in CHART_FIELDS:
            raise KeyError(f"Unknown chart field: '{field_name}'")
        return getattr(self, field_name)

    def present_fields(self) -> Tuple[str, ...]:
        return tuple(name for name in CHART_FIELDS if getattr(self, name) is not None)


CHART_FIELDS: Tuple[str, ...] = (
    "weight", "bmi", "intake", "target", "sleep", "fasting_duration", "water",
)


@dataclass(frozen=True)
class ValueDomain:
    """A [min, max] value range one metric group is scaled against (max > min)."""
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min


def _frozen_mapping(values: Mapping) -> Mapping:
    """Read-only copy of ``values``; later changes to the source dict do not leak in."""
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class ChartSnapshot:
    """Sorted records plus the domain of every metric group, derived together."""
    records: Tuple[ChartRecord, ...]
    domains: Mapping[str, ValueDomain] = field(default_factory=dict)

    def __post_init__(self):
        # Snapshots are shared through the cache, so the domains are read-only
        object.__setattr__(self, 'domains', _frozen_mapping(self.domains))

    @property
    def record_count(self) -> int:
        return len(self.records)

    def is_empty(self) -> bool:
        return not self.records


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Viewport:
    """
    Fixed chart geometry in pixels.

    Raises InvalidViewportError when the margins leave no plot area.
    """
    width: float = 500
    height: float = 300
    margin_top: float = 20
    margin_right: float = 50
    margin_bottom: float = 40
    margin_left: float = 50

    def __post_init__(self) -> None:
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise InvalidViewportError(
                width=self.width,
                height=self.height,
                plot_width=self.plot_width,
                plot_height=self.plot_height,
            )

    @property
    def plot_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def plot_right(self) -> float:
        return self.width - self.margin_right

    @property
    def plot_bottom(self) -> float:
        return self.height - self.margin_bottom

    @classmethod
    def from_settings(cls, settings) -> "Viewport":
        """Default viewport taken from application settings."""
        return cls(
            width=settings.progress_svc_chart_width,
            height=settings.progress_svc_chart_height,
            margin_top=settings.progress_svc_chart_margin_top,
            margin_right=settings.progress_svc_chart_margin_right,
            margin_bottom=settings.progress_svc_chart_margin_bottom,
            margin_left=settings.progress_svc_chart_margin_left,
        )


@dataclass(frozen=True)
class Point:
    x: float
    y: float


Segment = Tuple[Point, ...]


# =============================================================================
# RENDER OUTPUT
# =============================================================================

@dataclass(frozen=True)
class RenderedSeries:
    """Polyline geometry for one metric field."""
    field: str
    display_name: str
    color: str
    dashed: bool
    domain_group: str
    segments: Tuple[Segment, ...]
    path: str

    @property
    def points(self) -> Tuple[Point, ...]:
        """Marker positions: every present value, in record order."""
        return tuple(point for segment in self.segments for point in segment)

    def is_empty(self) -> bool:
        return not self.segments


@dataclass(frozen=True)
class AxisTick:
    value: float
    position: float
    label: str


@dataclass(frozen=True)
class XAxisLabel:
    index: int
    x: float
    label: str


@dataclass(frozen=True)
class RenderedChart:
    """Everything needed to draw the chart for one viewport."""
    viewport: Viewport
    records: Tuple[ChartRecord, ...]
    domains: Mapping[str, ValueDomain]
    series: Tuple[RenderedSeries, ...]
    y_ticks: Mapping[str, Tuple[AxisTick, ...]]
    x_labels: Tuple[XAxisLabel, ...]

    def __post_init__(self):
        object.__setattr__(self, 'domains', _frozen_mapping(self.domains))
        object.__setattr__(self, 'y_ticks', _frozen_mapping(self.y_ticks))

    def get_series(self, field_name: str) -> RenderedSeries:
        for series in self.series:
            if series.field == field_name:
                return series
        raise KeyError(f"No series for field: '{field_name}'")


# =============================================================================
# POINTER LOOKUP
# =============================================================================

@dataclass(frozen=True)
class TooltipLine:
    label: str
    value: str
    color: str


@dataclass(frozen=True)
class Tooltip:
    title: str
    lines: Tuple[TooltipLine, ...]


@dataclass(frozen=True)
class PointerHit:
    """The record nearest to a pointer and where to anchor its tooltip."""
    index: int
    record: ChartRecord
    anchor: Point
