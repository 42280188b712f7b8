"""
ASGI entry point for the Progress Chart Service.

Run locally with ``python -m progress_svc.main`` or point any ASGI server
at ``progress_svc.main:app``.

Request flow:
    LoggingMiddleware -> CORSMiddleware -> router
        -> ProgressService -> ChartService (merge, domains, geometry)
        -> MetricLogRepository -> SQLite
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from progress_svc import __version__
from progress_svc.api.routers import chart_router, health_router, logs_router
from progress_svc.core.config import API_HOST, API_PORT, API_RELOAD, settings
from progress_svc.core.dependencies import get_database
from progress_svc.core.exceptions import setup_exception_handlers
from progress_svc.core.logging_config import setup_logging
from progress_svc.core.middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Logging goes first so the store's startup line uses the configured format
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    db = get_database()
    logger.info("Progress Chart Service started", extra={"version": __version__, "db_path": db.db_path})
    yield
    logger.info("Progress Chart Service stopped")


def create_app() -> FastAPI:
    """Assemble the application: handlers, middleware, routers."""
    application = FastAPI(
        title="Progress Chart Service",
        description="Merges daily metric logs (weight, calories, sleep, fasting, water) "
                    "into a multi-series time chart with gap-aware lines and pointer tooltips.",
        version=__version__,
        lifespan=lifespan
    )
    setup_exception_handlers(application)

    # Added last runs first: LoggingMiddleware wraps CORS so preflights are logged too
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LoggingMiddleware)

    for router in (health_router, logs_router, chart_router):
        application.include_router(router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run("progress_svc.main:app", host=API_HOST, port=API_PORT, reload=API_RELOAD)
