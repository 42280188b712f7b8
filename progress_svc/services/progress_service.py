"""
Service layer for progress chart operations.

This service loads the metric logs, hands them to the chart pipeline and
shapes the results for the API.

Architecture:
    API Layer (routers) → ProgressService → MetricLogRepository → Database
                                         → ChartService (pure, memoized)

Dependency Injection:
    ProgressService receives the repository, the chart service and the
    default viewport via constructor injection.
    Use core.dependencies.get_progress_service() in routers with Depends().
"""
import logging
from typing import Any, List, Optional, Sequence, Tuple

from progress_svc.repositories.metric_log_repository import MetricLogRepository, parse_entries
from progress_svc.schemas.entries import MetricEntry
from progress_svc.services.chart import ChartService, PointerHit, RenderedChart, Viewport
from progress_svc.services.chart.models import ChartRecord, ChartSnapshot, Tooltip

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Service layer for the progress chart.

    Every call reads the current logs; unchanged logs hit the chart
    service's snapshot cache, so nothing derived is stored here.
    """

    def __init__(
        self,
        repository: MetricLogRepository,
        chart_service: ChartService,
        default_viewport: Optional[Viewport] = None,
    ):
        """
        Initialize the progress service.

        Args:
            repository: MetricLogRepository for reading and replacing logs.
            chart_service: ChartService shared across requests (owns the cache).
            default_viewport: Viewport used when a call does not pass one.
        """
        self._repository = repository
        self._chart_service = chart_service
        self._default_viewport = default_viewport or Viewport()

    @property
    def default_viewport(self) -> Viewport:
        return self._default_viewport

    def snapshot(self) -> ChartSnapshot:
        """Current merged records and domains."""
        return self._chart_service.build_snapshot(self._repository.load_sources())

    # =========================================================================
    # CHART
    # =========================================================================

    def get_records(self) -> Tuple[ChartRecord, ...]:
        """Chart records sorted by date."""
        return self.snapshot().records

    def render(self, viewport: Optional[Viewport] = None) -> RenderedChart:
        """Render geometry for ``viewport`` (the default viewport if omitted)."""
        return self._chart_service.render(self.snapshot(), viewport or self._default_viewport)

    def query_pointer(
        self, pointer_x: float, viewport: Optional[Viewport] = None
    ) -> Tuple[Optional[PointerHit], Optional[Tooltip]]:
        """
        Nearest record to a plot-local pointer x and its tooltip.

        Returns:
            (hit, tooltip), or (None, None) when nothing has been logged.
        """
        hit = self._chart_service.locate(
            self.snapshot(), viewport or self._default_viewport, pointer_x
        )
        if hit is None:
            return None, None
        return hit, self._chart_service.tooltip(hit)

    def generate_html(self, viewport: Optional[Viewport] = None) -> str:
        """Interactive Plotly HTML view of the chart."""
        viewport = viewport or self._default_viewport
        logger.info(
            "Generating chart HTML",
            extra={"width": viewport.width, "height": viewport.height}
        )
        return self._chart_service.generate_html_chart(self.snapshot(), viewport)

    # =========================================================================
    # METRIC LOGS
    # =========================================================================

    def get_log(self, key: str) -> List[MetricEntry]:
        """
        Parsed entries of one metric log.

        Raises:
            UnknownMetricLogError: If key is not a metric log name.
        """
        return self._repository.load_entries(key)

    def replace_log(self, key: str, payload: Sequence[Any]) -> List[MetricEntry]:
        """
        Validate ``payload`` and store it as the complete log ``key``.

        Raises:
            UnknownMetricLogError: If key is not a metric log name.
            MalformedSourceDataError: If any entry fails validation.
        """
        entries = parse_entries(key, list(payload))
        self._repository.save_entries(key, entries)
        return entries
