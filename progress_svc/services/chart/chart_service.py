"""
Service layer for the progress chart.

Pipeline:
    SourceLogs → merge_chart_records → compute_chart_domains  (ChartSnapshot)
    ChartSnapshot + Viewport → CoordinateMapper → path builder (RenderedChart)
    ChartSnapshot + Viewport + pointer x → pointer tracker     (PointerHit)

Snapshots are memoized on the (hashable) source logs, so repeated renders
and pointer queries over unchanged logs reuse one merge. Everything else is
recomputed per call; no derived chart data is ever stored.
"""

import logging
from functools import lru_cache
from typing import List, Optional, Tuple

import plotly.io as pio

from progress_svc.core.metric_registry import list_domain_groups, list_metrics
from progress_svc.services.chart.aggregator import merge_chart_records
from progress_svc.services.chart.coordinate_mapper import CoordinateMapper
from progress_svc.services.chart.domain_calculator import (
    compute_chart_domains,
    format_tick,
    tick_values,
)
from progress_svc.services.chart.models import (
    AxisTick,
    ChartSnapshot,
    PointerHit,
    RenderedChart,
    RenderedSeries,
    SourceLogs,
    Tooltip,
    Viewport,
    XAxisLabel,
)
from progress_svc.services.chart.path_builder import build_metric_segments, to_svg_path
from progress_svc.services.chart.plotly_builder import PlotlyBuilder
from progress_svc.services.chart.pointer_tracker import build_tooltip, format_day, locate_record

logger = logging.getLogger(__name__)

# Roughly this many day labels fit under the plot
X_LABEL_TARGET = 5


def x_label_indices(record_count: int) -> Tuple[int, ...]:
    """
    Record indices that get a day label on the x axis.

    Every ``(n - 1) // 5``-th record plus the last one; every record when
    there are only a few.
    """
    if record_count <= 1:
        return tuple(range(record_count))
    step = max(1, (record_count - 1) // X_LABEL_TARGET)
    return tuple(
        i for i in range(record_count)
        if i % step == 0 or i == record_count - 1
    )


class ChartService:
    """
    Builds chart snapshots, render geometry, pointer lookups and HTML views.

    Stateless apart from the bounded snapshot cache.
    """

    def __init__(
        self,
        plotly_builder: Optional[PlotlyBuilder] = None,
        cache_size: int = 32,
    ):
        """
        Initialize ChartService.

        Args:
            plotly_builder: Builder for the HTML view. A default instance is
                created if not provided.
            cache_size: Number of snapshots kept by the memoization cache.
        """
        self._builder = plotly_builder or PlotlyBuilder()
        self._cached_snapshot = lru_cache(maxsize=cache_size)(self._build_snapshot)

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def build_snapshot(self, sources: SourceLogs) -> ChartSnapshot:
        """Merged records and group domains for the given logs (memoized)."""
        return self._cached_snapshot(sources)

    def cache_info(self):
        return self._cached_snapshot.cache_info()

    def _build_snapshot(self, sources: SourceLogs) -> ChartSnapshot:
        records = merge_chart_records(sources)
        domains = compute_chart_domains(records)
        logger.info(
            "Chart snapshot built",
            extra={'entries': sources.total_entries(), 'records': len(records)}
        )
        return ChartSnapshot(records=records, domains=domains)

    # =========================================================================
    # RENDER
    # =========================================================================

    def render(self, snapshot: ChartSnapshot, viewport: Viewport) -> RenderedChart:
        """Series geometry, axis ticks and day labels for ``viewport``."""
        records = snapshot.records
        mapper = CoordinateMapper(viewport, snapshot.record_count)

        series: List[RenderedSeries] = []
        for metric in list_metrics():
            segments = build_metric_segments(
                records, metric.field, mapper, snapshot.domains[metric.domain_group]
            )
            series.append(RenderedSeries(
                field=metric.field,
                display_name=metric.display_name,
                color=metric.color,
                dashed=metric.dashed,
                domain_group=metric.domain_group,
                segments=segments,
                path=to_svg_path(segments),
            ))

        y_ticks = {}
        for group in list_domain_groups():
            domain = snapshot.domains[group.name]
            y_ticks[group.name] = tuple(
                AxisTick(
                    value=value,
                    position=mapper.y(value, domain),
                    label=format_tick(value, group.tick_decimals),
                )
                for value in tick_values(domain)
            )

        x_labels = tuple(
            XAxisLabel(index=i, x=mapper.x(i), label=format_day(records[i].date))
            for i in x_label_indices(snapshot.record_count)
        )

        return RenderedChart(
            viewport=viewport,
            records=records,
            domains=snapshot.domains,
            series=tuple(series),
            y_ticks=y_ticks,
            x_labels=x_labels,
        )

    # =========================================================================
    # POINTER
    # =========================================================================

    def locate(
        self, snapshot: ChartSnapshot, viewport: Viewport, pointer_x: float
    ) -> Optional[PointerHit]:
        """Record nearest to a plot-local pointer x, or None for an empty chart."""
        mapper = CoordinateMapper(viewport, snapshot.record_count)
        return locate_record(pointer_x, snapshot.records, mapper, snapshot.domains['weight'])

    def tooltip(self, hit: PointerHit) -> Tooltip:
        return build_tooltip(hit.record)

    # =========================================================================
    # HTML VIEW
    # =========================================================================

    def generate_html_chart(self, snapshot: ChartSnapshot, viewport: Viewport) -> str:
        """Complete HTML page with the interactive Plotly chart."""
        fig = self._builder.create_figure()

        if snapshot.is_empty():
            self._builder.apply_empty_layout(fig, viewport)
        else:
            chart = self.render(snapshot, viewport)
            self._builder.add_grid(fig, chart)
            for series in chart.series:
                self._builder.add_series_trace(fig, series)
            self._builder.add_axis_labels(fig, chart)

            mapper = CoordinateMapper(viewport, snapshot.record_count)
            hits = [
                locate_record(mapper.x(i), snapshot.records, mapper, snapshot.domains['weight'])
                for i in range(snapshot.record_count)
            ]
            self._builder.add_hover_trace(fig, hits, [self.tooltip(hit) for hit in hits])
            self._builder.apply_layout(fig, viewport)

        html_content = pio.to_html(
            fig,
            include_plotlyjs='cdn',
            config=self._builder.get_mobile_config(),
            div_id="progress-chart",
        )
        return self._builder.inject_mobile_css(html_content)
