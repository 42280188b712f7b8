"""
Repository for metric log storage.

Each of the five metric logs is stored as one JSON list in the
``metric_logs`` table, keyed by its fixed log name.

Architecture:
    MetricLogRepository is the data access layer for metric logs.
    It should be injected via core.dependencies.get_metric_log_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.

Reads never fail on bad data: a payload that is not valid JSON or whose
entries do not match the log's model is logged and treated as an empty log.
"""
import json
import logging
import sqlite3
from typing import Any, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from progress_svc.core.exceptions import (
    DatabaseError,
    MalformedSourceDataError,
    UnknownMetricLogError,
)
from progress_svc.repositories.base import Database
from progress_svc.schemas.entries import ENTRY_MODELS, METRIC_LOG_KEYS, MetricEntry
from progress_svc.services.chart.models import SourceLogs

logger = logging.getLogger(__name__)


def validate_log_key(key: str) -> None:
    """Raise UnknownMetricLogError unless ``key`` is one of the fixed log names."""
    if key not in ENTRY_MODELS:
        raise UnknownMetricLogError(key=key, allowed=list(METRIC_LOG_KEYS))


def parse_entries(key: str, payload: Any) -> List[MetricEntry]:
    """
    Validate a decoded payload against the entry model of log ``key``.

    Args:
        key: Metric log name.
        payload: Decoded JSON (expected to be a list of objects).

    Returns:
        List of frozen entry models in payload order.

    Raises:
        UnknownMetricLogError: If key is not a metric log name.
        MalformedSourceDataError: If the payload does not match the model.
    """
    validate_log_key(key)
    adapter = TypeAdapter(List[ENTRY_MODELS[key]])
    try:
        return adapter.validate_python(payload)
    except ValidationError as e:
        raise MalformedSourceDataError(key=key, reason=f"{e.error_count()} validation error(s)") from e


class MetricLogRepository:
    """
    Repository for reading and replacing metric logs.

    It should be instantiated via core.dependencies.get_metric_log_repository().
    """

    def __init__(self, db: Database):
        """
        Initialize the metric log repository.

        Args:
            db: Database instance for data access.
                Injected via core.dependencies.get_metric_log_repository().
        """
        self._db = db

    # =========================================================================
    # RAW PAYLOADS
    # =========================================================================

    def get_raw(self, key: str) -> Optional[str]:
        """
        Get the stored JSON payload of a log.

        Returns:
            Optional[str]: The raw payload, or None if nothing is stored.
        """
        validate_log_key(key)
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT payload FROM metric_logs WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to read metric log '{key}': {e}")
            raise DatabaseError(operation="read metric log", key=key) from e
        finally:
            conn.close()

        return row[0] if row else None

    def save_raw(self, key: str, payload: str) -> None:
        """Store ``payload`` under ``key`` as-is, replacing any previous value."""
        validate_log_key(key)
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO metric_logs (key, payload, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
            """, (key, payload))
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to write metric log '{key}': {e}")
            raise DatabaseError(operation="write metric log", key=key) from e
        finally:
            conn.close()

    # =========================================================================
    # ENTRIES
    # =========================================================================

    def save_entries(self, key: str, entries: Sequence[MetricEntry]) -> None:
        """Serialize entries with the client's camelCase keys and store them."""
        payload = json.dumps([
            entry.model_dump(mode="json", by_alias=True) for entry in entries
        ])
        self.save_raw(key, payload)
        logger.info(
            "Metric log replaced",
            extra={"log_key": key, "entries": len(entries)}
        )

    def load_entries(self, key: str) -> List[MetricEntry]:
        """
        Load and parse the entries of one log.

        Missing data and malformed data both yield an empty list; malformed
        data is logged at WARNING.

        Raises:
            UnknownMetricLogError: If key is not a metric log name.
            DatabaseError: If the read itself fails.
        """
        raw = self.get_raw(key)
        if raw is None:
            return []

        try:
            try:
                payload = json.loads(raw)
            except json.JSONDecodeError as e:
                raise MalformedSourceDataError(key=key, reason=f"invalid JSON: {e.msg}") from e
            return parse_entries(key, payload)
        except MalformedSourceDataError as e:
            logger.warning(
                f"Ignoring malformed metric log '{key}'",
                extra={"log_key": key, "reason": e.context.get("reason")}
            )
            return []

    def load_sources(self) -> SourceLogs:
        """All five logs, each in stored order, as one hashable bundle."""
        return SourceLogs(**{
            key: tuple(self.load_entries(key)) for key in METRIC_LOG_KEYS
        })
