"""
Service layer for business logic.

This package contains the chart pipeline and the orchestration service.

Note: ProgressService is not re-exported here to avoid circular imports
(the repository layer depends on services.chart.models).
Import it directly from its module:
- from progress_svc.services.progress_service import ProgressService
"""
