"""
Shared pytest fixtures for the Progress Chart Service tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories

Fixture Hierarchy:
    temp_db → metric_log_repo → chart_service / progress_service → test_app → client
"""
import os
import tempfile

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from progress_svc.core import dependencies as deps
from progress_svc.core.exceptions import setup_exception_handlers
from progress_svc.repositories import Database, MetricLogRepository
from progress_svc.schemas.entries import (
    DailyIntake,
    FastingEntry,
    ProgressEntry,
    SleepEntry,
    WaterEntry,
)
from progress_svc.services.chart import ChartService, SourceLogs, Viewport
from progress_svc.services.progress_service import ProgressService


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    This fixture creates a fresh SQLite database in a temp file,
    ensuring complete isolation between tests.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    # Cleanup (WAL mode leaves -wal/-shm companions behind)
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def metric_log_repo(temp_db):
    """Create a MetricLogRepository with the test database."""
    return MetricLogRepository(db=temp_db)


@pytest.fixture
def chart_service():
    """Create a ChartService with its own snapshot cache."""
    return ChartService(cache_size=8)


@pytest.fixture
def viewport():
    """The default 500x300 viewport (plot area 400x240 starting at 50,20)."""
    return Viewport()


@pytest.fixture
def progress_service(metric_log_repo, chart_service, viewport):
    """Create a ProgressService with test collaborators."""
    return ProgressService(
        repository=metric_log_repo,
        chart_service=chart_service,
        default_viewport=viewport,
    )


@pytest.fixture
def scenario_sources():
    """
    Three days of sparse logs.

    2024-01-01: weight 80, bmi 26.1, sleep 7
    2024-01-02: sleep 6.5
    2024-01-08: weight 79, bmi 25.7
    """
    return SourceLogs(
        progress=(
            ProgressEntry(date="2024-01-01", weight=80, bmi=26.1),
            ProgressEntry(date="2024-01-08", weight=79, bmi=25.7),
        ),
        sleep=(
            SleepEntry(date="2024-01-01", hours=7),
            SleepEntry(date="2024-01-02", hours=6.5),
        ),
    )


@pytest.fixture
def full_sources():
    """One week in which every log has at least one entry."""
    return SourceLogs(
        progress=(
            ProgressEntry(date="2024-03-01", weight=82.4, bmi=26.9),
            ProgressEntry(date="2024-03-04", weight=81.9, bmi=26.7),
            ProgressEntry(date="2024-03-07", weight=81.2, bmi=26.5),
        ),
        daily_intake=(
            DailyIntake(date="2024-03-01", totalIntake=2100, targetCalories=1900),
            DailyIntake(date="2024-03-02", totalIntake=1850, targetCalories=1900),
            DailyIntake(date="2024-03-03", totalIntake=1700, targetCalories=1900),
        ),
        sleep=(
            SleepEntry(date="2024-03-02", hours=7.5),
            SleepEntry(date="2024-03-05", hours=6),
        ),
        fasting=(
            FastingEntry(date="2024-03-03", duration=16),
        ),
        water=(
            WaterEntry(date="2024-03-06", glasses=8),
            WaterEntry(date="2024-03-07", glasses=6),
        ),
    )


@pytest.fixture
def test_app(temp_db, metric_log_repo, chart_service, progress_service, viewport):
    """
    Create a FastAPI test app with dependency overrides.

    Uses the real routers and exception handlers, with the database and
    services replaced by test instances.
    """
    from progress_svc.api.routers import chart_router, health_router, logs_router

    app = FastAPI(title="Progress Chart Service Test")

    # Register exception handlers (same as production)
    setup_exception_handlers(app)

    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_metric_log_repository] = lambda: metric_log_repo
    app.dependency_overrides[deps.get_chart_service] = lambda: chart_service
    app.dependency_overrides[deps.get_default_viewport] = lambda: viewport
    app.dependency_overrides[deps.get_progress_service] = lambda: progress_service

    # Include the real routers (not test copies)
    app.include_router(health_router)
    app.include_router(logs_router)
    app.include_router(chart_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)
