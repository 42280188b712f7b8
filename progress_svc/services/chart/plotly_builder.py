"""
Plotly figure builder for the progress chart.

Responsibilities:
- Drawing the pre-computed series geometry (segments, markers)
- Axis tick labels per metric group and day labels along x
- Hover targets carrying the tooltip of each record
- Layout for the populated and the empty chart

The figure works directly in viewport pixels: both axes are hidden, x runs
from 0 to the viewport width and y is reversed so that pixel coordinates
from the coordinate mapper can be used unchanged. Plotly breaks a line at
every ``None``, which is how segment gaps are preserved.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from progress_svc.core.metric_registry import list_domain_groups
from progress_svc.services.chart.models import (
    PointerHit,
    RenderedChart,
    RenderedSeries,
    Tooltip,
    Viewport,
)

logger = logging.getLogger(__name__)

GRID_COLOR = 'rgba(0,0,0,0.08)'
LABEL_COLOR = '#6B7280'

# Horizontal offset of each left-hand tick column from the plot edge
LEFT_TICK_OFFSETS = (5, 25)
RIGHT_TICK_OFFSET = 5
X_LABEL_OFFSET = 15


class PlotlyBuilder:
    """
    Builder for constructing Plotly figures from a RenderedChart.

    Usage:
        builder = PlotlyBuilder()
        fig = builder.create_figure()
        builder.add_grid(fig, chart)
        for series in chart.series:
            builder.add_series_trace(fig, series)
        builder.add_axis_labels(fig, chart)
        builder.add_hover_trace(fig, hits, tooltips)
        builder.apply_layout(fig, chart.viewport)
    """

    def create_figure(self) -> go.Figure:
        """Create a new empty Plotly figure."""
        return go.Figure()

    def add_series_trace(self, fig: go.Figure, series: RenderedSeries) -> None:
        """
        Add one metric's polyline and markers.

        Segments are concatenated with ``None`` separators; connectgaps stays
        off so Plotly never bridges a day on which the metric is missing.
        """
        xs, ys = flatten_segments(series)
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            name=series.display_name,
            mode='lines+markers',
            line=dict(color=series.color, width=2, dash='dash' if series.dashed else 'solid'),
            marker=dict(size=6, color=series.color),
            connectgaps=False,
            hoverinfo='skip',
        ))

    def add_grid(self, fig: go.Figure, chart: RenderedChart) -> None:
        """Dashed horizontal grid lines at the first metric group's ticks."""
        groups = list_domain_groups()
        if not groups:
            return
        vp = chart.viewport
        for tick in chart.y_ticks.get(groups[0].name, ()):
            fig.add_shape(
                type='line',
                x0=vp.margin_left, x1=vp.plot_right,
                y0=tick.position, y1=tick.position,
                line=dict(color=GRID_COLOR, width=1, dash='dot'),
                layer='below',
            )

    def add_axis_labels(self, fig: go.Figure, chart: RenderedChart) -> None:
        """Tick labels for each metric group and day labels under the plot."""
        vp = chart.viewport
        left_column = 0
        for group in list_domain_groups():
            ticks = chart.y_ticks.get(group.name, ())
            if group.side == 'left':
                offset = LEFT_TICK_OFFSETS[min(left_column, len(LEFT_TICK_OFFSETS) - 1)]
                x = vp.margin_left - offset
                xanchor = 'right'
                left_column += 1
            else:
                x = vp.plot_right + RIGHT_TICK_OFFSET
                xanchor = 'left'
            color = self._group_color(chart, group.name)
            for tick in ticks:
                fig.add_annotation(
                    x=x, y=tick.position,
                    text=tick.label,
                    showarrow=False,
                    xanchor=xanchor,
                    font=dict(size=10, color=color),
                )

        for label in chart.x_labels:
            fig.add_annotation(
                x=label.x, y=vp.plot_bottom + X_LABEL_OFFSET,
                text=label.label,
                showarrow=False,
                font=dict(size=10, color=LABEL_COLOR),
            )

    def add_hover_trace(
        self,
        fig: go.Figure,
        hits: Sequence[PointerHit],
        tooltips: Sequence[Tooltip],
    ) -> None:
        """
        Add invisible hover targets, one per record, at the tooltip anchors.

        With ``hovermode='x'`` the nearest record's tooltip is shown, matching
        the pointer tracker's lookup.
        """
        if not hits:
            return
        fig.add_trace(go.Scatter(
            x=[hit.anchor.x for hit in hits],
            y=[hit.anchor.y for hit in hits],
            mode='markers',
            marker=dict(size=1, opacity=0),
            text=[self._tooltip_html(tooltip) for tooltip in tooltips],
            hovertemplate="%{text}<extra></extra>",
            showlegend=False,
            name='tooltip',
        ))

    def apply_layout(self, fig: go.Figure, viewport: Viewport) -> None:
        """Pixel-space layout with hidden axes and a horizontal legend."""
        fig.update_layout(
            width=viewport.width,
            height=viewport.height,
            xaxis=dict(range=[0, viewport.width], visible=False, fixedrange=True),
            yaxis=dict(range=[viewport.height, 0], visible=False, fixedrange=True),
            margin=dict(l=0, r=0, t=0, b=0),
            template='plotly_white',
            paper_bgcolor='#FFFFFF',
            plot_bgcolor='#FFFFFF',
            hovermode='x',
            legend=dict(
                orientation='h',
                x=0, xanchor='left',
                y=1, yanchor='top',
                font=dict(size=10, color='#374151'),
                bgcolor='rgba(255,255,255,0.8)',
            ),
            hoverlabel=dict(
                bgcolor='white',
                font_size=11,
                bordercolor='rgba(0,0,0,0.1)',
            ),
        )

    def apply_empty_layout(self, fig: go.Figure, viewport: Viewport) -> None:
        """Layout for a chart with no logged data."""
        fig.update_layout(
            width=viewport.width,
            height=viewport.height,
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            margin=dict(l=0, r=0, t=0, b=0),
            template='plotly_white',
            paper_bgcolor='#FFFFFF',
            plot_bgcolor='#FFFFFF',
            annotations=[
                dict(text='<b>No progress data yet.</b>', xref='paper', yref='paper',
                     x=0.5, y=0.55, showarrow=False, font=dict(size=16, color='#4B5563')),
                dict(text='Log your weight, meals, sleep, fasting or water to start tracking!',
                     xref='paper', yref='paper', x=0.5, y=0.42,
                     showarrow=False, font=dict(size=12, color='#6B7280')),
            ],
        )

    def get_mobile_config(self) -> Dict[str, Any]:
        """Plotly config: static axes, no mode bar clutter."""
        return {
            'displayModeBar': False,
            'displaylogo': False,
            'responsive': True,
            'scrollZoom': False,
            'doubleClick': False,
        }

    def inject_mobile_css(self, html_content: str) -> str:
        """Inject responsive CSS so the fixed-size chart scales with the page."""
        styles = """
        <style>
            * { box-sizing: border-box; }
            body {
                margin: 0;
                padding: 8px;
                background: #F9FAFB;
                font-family: -apple-system, system-ui, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            }
            #progress-chart {
                max-width: 100%;
                border-radius: 10px;
                box-shadow: 0 1px 4px rgba(0,0,0,0.06);
                background: white;
            }
            @media (max-width: 520px) {
                body { padding: 2px; }
                .legend .legendtext { font-size: 9px !important; }
            }
        </style>
        """
        return html_content.replace('<body>', f'<body>{styles}')

    def _group_color(self, chart: RenderedChart, group_name: str) -> str:
        """Colour of the group's first series, so tick labels match their lines."""
        for series in chart.series:
            if series.domain_group == group_name:
                return series.color
        return LABEL_COLOR

    def _tooltip_html(self, tooltip: Tooltip) -> str:
        lines: List[str] = [f"<b>{tooltip.title}</b>"]
        for line in tooltip.lines:
            lines.append(f"<span style='color:{line.color}'><b>{line.label}:</b></span> {line.value}")
        return "<br>".join(lines)


def flatten_segments(series: RenderedSeries) -> Tuple[List[Optional[float]], List[Optional[float]]]:
    """x/y lists for a series with ``None`` between segments."""
    xs: List[Optional[float]] = []
    ys: List[Optional[float]] = []
    for position, segment in enumerate(series.segments):
        if position > 0:
            xs.append(None)
            ys.append(None)
        xs.extend(point.x for point in segment)
        ys.extend(point.y for point in segment)
    return xs, ys
