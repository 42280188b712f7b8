"""
Providers for FastAPI ``Depends()``.

    router -> get_progress_service()
                -> get_metric_log_repository() -> get_database()
                -> get_chart_service()
                -> get_default_viewport()

The database handle and the chart service are process-wide: the first
owns the schema bootstrap, the second owns the snapshot cache. Everything
else is cheap and built per request.

Imports of repositories and services happen inside the providers because
those packages import from ``progress_svc.core`` themselves.

Tests swap any provider out with ``app.dependency_overrides[provider]``.
"""
import logging
from typing import TYPE_CHECKING, Optional

from progress_svc.core.config import settings

if TYPE_CHECKING:
    from progress_svc.repositories import Database, MetricLogRepository
    from progress_svc.services.chart import ChartService, Viewport
    from progress_svc.services.progress_service import ProgressService

logger = logging.getLogger(__name__)

_database: Optional["Database"] = None
_chart_service: Optional["ChartService"] = None


def get_database() -> "Database":
    global _database
    if _database is None:
        from progress_svc.repositories.base import Database

        _database = Database(
            db_path=settings.database_path,
            busy_timeout=settings.progress_svc_db_busy_timeout
        )
    return _database


def reset_database() -> None:
    """Forget the shared handle so the next get_database() opens a new one."""
    global _database
    _database = None


def get_metric_log_repository() -> "MetricLogRepository":
    from progress_svc.repositories import MetricLogRepository

    return MetricLogRepository(db=get_database())


def get_chart_service() -> "ChartService":
    """Shared ChartService; its snapshot cache lives as long as the process."""
    global _chart_service
    if _chart_service is None:
        from progress_svc.services.chart import ChartService

        _chart_service = ChartService(cache_size=settings.progress_svc_chart_cache_size)
        logger.debug(
            "Chart service created",
            extra={"cache_size": settings.progress_svc_chart_cache_size}
        )
    return _chart_service


def get_default_viewport() -> "Viewport":
    from progress_svc.services.chart import Viewport

    return Viewport.from_settings(settings)


def get_progress_service() -> "ProgressService":
    from progress_svc.services.progress_service import ProgressService

    return ProgressService(
        repository=get_metric_log_repository(),
        chart_service=get_chart_service(),
        default_viewport=get_default_viewport(),
    )
