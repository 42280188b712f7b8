"""
Pydantic schemas for the chart API responses.

The chart pipeline works on frozen dataclasses; these models are the JSON
shape of those values at the API boundary. Absent metrics stay ``null``.
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from progress_svc.services.chart.models import (
    ChartRecord,
    PointerHit,
    RenderedChart,
    RenderedSeries,
    Tooltip,
    ValueDomain,
    Viewport,
)


class ChartRecordResponse(BaseModel):
    """One calendar day of merged metric values."""
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)", examples=["2024-01-01"])
    weight: Optional[float] = Field(None, description="Body weight in kg", examples=[80.0])
    bmi: Optional[float] = Field(None, description="Body mass index", examples=[26.1])
    intake: Optional[float] = Field(None, description="Calories eaten", examples=[1850])
    target: Optional[float] = Field(None, description="Calorie target", examples=[1800])
    sleep: Optional[float] = Field(None, description="Hours slept", examples=[7.0])
    fasting_duration: Optional[float] = Field(None, description="Fasting window in hours", examples=[16])
    water: Optional[float] = Field(None, description="Glasses of water", examples=[8])

    @classmethod
    def from_record(cls, record: ChartRecord) -> "ChartRecordResponse":
        return cls(**asdict(record))


class DomainResponse(BaseModel):
    min: float
    max: float

    @classmethod
    def from_domain(cls, domain: ValueDomain) -> "DomainResponse":
        return cls(min=domain.min, max=domain.max)


class PointResponse(BaseModel):
    x: float
    y: float


class ViewportResponse(BaseModel):
    width: float
    height: float
    margin_top: float
    margin_right: float
    margin_bottom: float
    margin_left: float

    @classmethod
    def from_viewport(cls, viewport: Viewport) -> "ViewportResponse":
        return cls(**asdict(viewport))


class SeriesResponse(BaseModel):
    """Geometry of one metric line."""
    field: str = Field(..., examples=["weight"])
    display_name: str = Field(..., examples=["Weight"])
    color: str = Field(..., examples=["#F97316"])
    dashed: bool = False
    domain_group: str = Field(..., examples=["weight"])
    path: str = Field(..., description="SVG path data, one M per segment", examples=["M 50 170 L 450 30"])
    segments: List[List[PointResponse]] = Field(
        default_factory=list, description="Maximal runs of consecutive present values"
    )
    points: List[PointResponse] = Field(default_factory=list, description="Marker positions")

    @classmethod
    def from_series(cls, series: RenderedSeries) -> "SeriesResponse":
        return cls(
            field=series.field,
            display_name=series.display_name,
            color=series.color,
            dashed=series.dashed,
            domain_group=series.domain_group,
            path=series.path,
            segments=[
                [PointResponse(x=p.x, y=p.y) for p in segment]
                for segment in series.segments
            ],
            points=[PointResponse(x=p.x, y=p.y) for p in series.points],
        )


class AxisTickResponse(BaseModel):
    value: float
    position: float
    label: str


class XAxisLabelResponse(BaseModel):
    index: int
    x: float
    label: str


class RenderResponse(BaseModel):
    """Everything a client needs to draw the chart for one viewport."""
    viewport: ViewportResponse
    records: List[ChartRecordResponse]
    domains: Dict[str, DomainResponse]
    series: List[SeriesResponse]
    y_ticks: Dict[str, List[AxisTickResponse]]
    x_labels: List[XAxisLabelResponse]

    @classmethod
    def from_chart(cls, chart: RenderedChart) -> "RenderResponse":
        return cls(
            viewport=ViewportResponse.from_viewport(chart.viewport),
            records=[ChartRecordResponse.from_record(r) for r in chart.records],
            domains={name: DomainResponse.from_domain(d) for name, d in chart.domains.items()},
            series=[SeriesResponse.from_series(s) for s in chart.series],
            y_ticks={
                name: [AxisTickResponse(**asdict(tick)) for tick in ticks]
                for name, ticks in chart.y_ticks.items()
            },
            x_labels=[XAxisLabelResponse(**asdict(label)) for label in chart.x_labels],
        )


class TooltipLineResponse(BaseModel):
    label: str = Field(..., examples=["Weight"])
    value: str = Field(..., examples=["80 kg"])
    color: str = Field(..., examples=["#F97316"])


class TooltipResponse(BaseModel):
    title: str = Field(..., examples=["Mon 1 Jan"])
    lines: List[TooltipLineResponse]

    @classmethod
    def from_tooltip(cls, tooltip: Tooltip) -> "TooltipResponse":
        return cls(
            title=tooltip.title,
            lines=[TooltipLineResponse(**asdict(line)) for line in tooltip.lines],
        )


class PointerResponse(BaseModel):
    """Nearest record to a pointer position; all fields null for an empty chart."""
    index: Optional[int] = None
    anchor: Optional[PointResponse] = None
    record: Optional[ChartRecordResponse] = None
    tooltip: Optional[TooltipResponse] = None

    @classmethod
    def from_hit(cls, hit: Optional[PointerHit], tooltip: Optional[Tooltip]) -> "PointerResponse":
        if hit is None:
            return cls()
        return cls(
            index=hit.index,
            anchor=PointResponse(x=hit.anchor.x, y=hit.anchor.y),
            record=ChartRecordResponse.from_record(hit.record),
            tooltip=TooltipResponse.from_tooltip(tooltip) if tooltip else None,
        )


class MetricLogResponse(BaseModel):
    """Entries of one metric log as the client stores them."""
    key: str = Field(..., examples=["progress"])
    entries: List[Dict[str, Any]] = Field(
        default_factory=list,
        examples=[[{"date": "2024-01-01", "weight": 80.0, "bmi": 26.1}]],
    )
