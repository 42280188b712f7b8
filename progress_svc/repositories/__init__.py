"""
Repository package for database operations.

This package contains data access layer classes that encapsulate
all SQL operations, keeping them separate from business logic.
"""
from progress_svc.repositories.base import Database
from progress_svc.repositories.metric_log_repository import MetricLogRepository

__all__ = ['Database', 'MetricLogRepository']
