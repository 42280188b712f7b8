"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from progress_svc.api.routers.health import router as health_router
from progress_svc.api.routers.chart import router as chart_router
from progress_svc.api.routers.logs import router as logs_router

__all__ = ["health_router", "chart_router", "logs_router"]
