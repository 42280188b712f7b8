"""
Core module for application configuration, logging, and shared definitions.

This module provides:
- Settings: Application configuration via pydantic-settings
- Dependency injection: FastAPI Depends() functions for services and repositories
- Exceptions: Domain-specific exception classes with HTTP status codes
- Metric registry: Chart metric and domain group definitions
"""
from progress_svc.core.config import settings, Settings

# Dependency injection - import functions for FastAPI Depends()
from progress_svc.core.dependencies import (
    get_database,
    get_metric_log_repository,
    get_chart_service,
    get_default_viewport,
    get_progress_service,
    reset_database,
)

# Exception classes for consistent error handling
from progress_svc.core.exceptions import (
    ProgressServiceError,
    InvalidViewportError,
    UnknownMetricLogError,
    MalformedSourceDataError,
    DatabaseError,
    setup_exception_handlers,
)

# Metric registry exports
from progress_svc.core.metric_registry import (
    ChartMetricDefinition,
    DomainGroupDefinition,
    get_metric,
    list_metrics,
    metrics_for_source,
    metrics_for_group,
    get_domain_group,
    list_domain_groups,
    format_metric_value,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Dependency injection
    "get_database",
    "get_metric_log_repository",
    "get_chart_service",
    "get_default_viewport",
    "get_progress_service",
    "reset_database",
    # Exceptions
    "ProgressServiceError",
    "InvalidViewportError",
    "UnknownMetricLogError",
    "MalformedSourceDataError",
    "DatabaseError",
    "setup_exception_handlers",
    # Metric registry
    "ChartMetricDefinition",
    "DomainGroupDefinition",
    "get_metric",
    "list_metrics",
    "metrics_for_source",
    "metrics_for_group",
    "get_domain_group",
    "list_domain_groups",
    "format_metric_value",
]
