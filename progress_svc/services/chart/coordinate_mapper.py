"""
Affine mapping between chart data space and plot pixels.

Records are spaced evenly along x by index (not by elapsed days); y is
scaled per value domain with larger values drawn higher. The inverse x
mapping is what the pointer tracker uses to find the nearest record.
"""

import math

from progress_svc.services.chart.models import ValueDomain, Viewport


class CoordinateMapper:
    """
    Pixel mapping for ``record_count`` records inside ``viewport``.

    Usage:
        mapper = CoordinateMapper(Viewport(), record_count=len(records))
        x = mapper.x(3)
        y = mapper.y(79.5, domains["weight"])
    """

    def __init__(self, viewport: Viewport, record_count: int):
        self.viewport = viewport
        self.record_count = record_count

    @property
    def _last_index(self) -> int:
        return self.record_count - 1

    def x(self, index: int) -> float:
        """Horizontal pixel of a record; a single record sits on the left margin."""
        vp = self.viewport
        return vp.margin_left + (index / max(self._last_index, 1)) * vp.plot_width

    def y(self, value: float, domain: ValueDomain) -> float:
        """Vertical pixel of a value within ``domain``."""
        vp = self.viewport
        return vp.plot_bottom - ((value - domain.min) / domain.span) * vp.plot_height

    def index_at(self, pointer_x: float) -> int:
        """
        Nearest record index for a plot-local pointer x.

        Rounds half up. Pointers left or right of the plot (including
        infinities) land on the first or last record.

        Raises:
            ValueError: If there are no records, or ``pointer_x`` is NaN
        """
        if self.record_count <= 0:
            raise ValueError("index_at requires at least one record")
        if math.isnan(pointer_x):
            raise ValueError("pointer x is NaN")
        vp = self.viewport
        # Clamp in pixel space first so the product below stays finite
        clamped = min(max(pointer_x, vp.margin_left), vp.plot_right)
        estimated = math.floor(((clamped - vp.margin_left) / vp.plot_width) * self._last_index + 0.5)
        return min(max(estimated, 0), self._last_index)
