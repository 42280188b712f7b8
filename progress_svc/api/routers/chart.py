"""
Chart router - merged records, render geometry, pointer queries, HTML view.

Architecture:
    HTTP Request → Router (this file) → ProgressService → ChartService
                                                        → MetricLogRepository

Every endpoint reads the current metric logs; unchanged logs reuse the
memoized snapshot. Viewport geometry defaults to the configured viewport
and any dimension can be overridden per request via query parameters.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from progress_svc.core.dependencies import get_default_viewport, get_progress_service
from progress_svc.schemas.chart import ChartRecordResponse, PointerResponse, RenderResponse
from progress_svc.services.chart import Viewport
from progress_svc.services.progress_service import ProgressService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/chart",
    tags=["Progress Chart"],
)


def get_request_viewport(
    width: Optional[float] = Query(None, gt=0, description="Chart width in pixels", examples=[500]),
    height: Optional[float] = Query(None, gt=0, description="Chart height in pixels", examples=[300]),
    margin_top: Optional[float] = Query(None, ge=0, description="Top margin in pixels"),
    margin_right: Optional[float] = Query(None, ge=0, description="Right margin in pixels"),
    margin_bottom: Optional[float] = Query(None, ge=0, description="Bottom margin in pixels"),
    margin_left: Optional[float] = Query(None, ge=0, description="Left margin in pixels"),
    default: Viewport = Depends(get_default_viewport),
) -> Viewport:
    """
    Viewport for this request: the default with query overrides applied.

    Raises InvalidViewportError (400) when the margins leave no plot area.
    """
    return Viewport(
        width=width if width is not None else default.width,
        height=height if height is not None else default.height,
        margin_top=margin_top if margin_top is not None else default.margin_top,
        margin_right=margin_right if margin_right is not None else default.margin_right,
        margin_bottom=margin_bottom if margin_bottom is not None else default.margin_bottom,
        margin_left=margin_left if margin_left is not None else default.margin_left,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/records",
    response_model=List[ChartRecordResponse],
    summary="List merged chart records",
    description="One record per calendar day with any metric logged, ascending by date. "
                "Metrics not logged on a day are null."
)
async def list_chart_records(
    progress_service: ProgressService = Depends(get_progress_service)
):
    return [ChartRecordResponse.from_record(r) for r in progress_service.get_records()]


@router.get(
    "/render",
    response_model=RenderResponse,
    summary="Render chart geometry",
    description="Value domains, per-metric polylines (gaps preserved), axis ticks and day labels "
                "for the requested viewport."
)
async def render_chart(
    viewport: Viewport = Depends(get_request_viewport),
    progress_service: ProgressService = Depends(get_progress_service)
):
    """
    Render geometry for a viewport.

    Raises:
    - 400 Bad Request: If the margins leave no plot area (InvalidViewportError)
    """
    return RenderResponse.from_chart(progress_service.render(viewport))


@router.get(
    "/pointer",
    response_model=PointerResponse,
    summary="Locate the record under a pointer",
    description="Nearest record to a plot-local pointer x coordinate, its tooltip anchor and tooltip. "
                "Positions outside the plot clamp to the first or last record; all fields are null "
                "when nothing has been logged."
)
async def query_pointer(
    x: float = Query(..., allow_inf_nan=False, description="Pointer x in plot-local pixels", examples=[250]),
    viewport: Viewport = Depends(get_request_viewport),
    progress_service: ProgressService = Depends(get_progress_service)
):
    hit, tooltip = progress_service.query_pointer(x, viewport)
    return PointerResponse.from_hit(hit, tooltip)


@router.get(
    "/html-view",
    summary="Get HTML chart view",
    description="Interactive Plotly rendering of the progress chart for the requested viewport."
)
async def get_html_view(
    viewport: Viewport = Depends(get_request_viewport),
    progress_service: ProgressService = Depends(get_progress_service)
):
    """
    Get HTML chart view.

    The HTML can be embedded in a web view or opened directly in a browser.
    An empty-state page is returned when nothing has been logged.
    """
    html_content = progress_service.generate_html(viewport)
    return Response(content=html_content, media_type="text/html")
