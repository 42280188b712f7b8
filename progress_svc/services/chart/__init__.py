"""
Chart package for the progress visualization.

This package contains:
- aggregator: merges the five metric logs into sorted sparse records
- domain_calculator: padded per-group value domains
- coordinate_mapper: data space ↔ pixel mapping
- path_builder: gap-aware polylines
- pointer_tracker: nearest record and tooltip for a pointer position
- ChartService: orchestration and memoized snapshots
- PlotlyBuilder: Plotly-specific figure construction

Usage:
    from progress_svc.services.chart import ChartService, Viewport

    service = ChartService()
    snapshot = service.build_snapshot(sources)
    chart = service.render(snapshot, Viewport())
"""

from progress_svc.services.chart.chart_service import ChartService
from progress_svc.services.chart.models import (
    ChartRecord,
    ChartSnapshot,
    PointerHit,
    RenderedChart,
    SourceLogs,
    ValueDomain,
    Viewport,
)
from progress_svc.services.chart.plotly_builder import PlotlyBuilder

__all__ = [
    'ChartService',
    'PlotlyBuilder',
    'ChartRecord',
    'ChartSnapshot',
    'PointerHit',
    'RenderedChart',
    'SourceLogs',
    'ValueDomain',
    'Viewport',
]
