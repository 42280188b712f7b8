"""
SQLite database handle and schema.

The service stores exactly one table: ``metric_logs``, one row per metric
log holding the JSON list as the client wrote it. Chart data is always
derived from these rows and never written back.

Concurrency: the file is switched to WAL journaling (readers do not block
the writer) and every connection waits up to ``busy_timeout`` ms for a lock
instead of failing immediately.

Obtain the shared instance through progress_svc.core.dependencies.get_database();
tests construct their own against a temporary file.
"""
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from progress_svc.core.config import DATABASE_BUSY_TIMEOUT, DATABASE_PATH

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS metric_logs (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
)
"""


class Database:
    """
    Connection factory for the metric log store.

    Connections are short-lived: repositories open one per operation and
    close it when done.
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Args:
            db_path: SQLite file. Defaults to the configured DATABASE_PATH;
                missing parent directories are created.
            busy_timeout: Lock wait in milliseconds. Defaults to configuration.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = DATABASE_BUSY_TIMEOUT if busy_timeout is None else busy_timeout

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._create_schema()

    def get_connection(self) -> sqlite3.Connection:
        """Open a new connection with the busy timeout applied."""
        conn = sqlite3.connect(self.db_path)
        conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout)}")
        return conn

    def _create_schema(self) -> None:
        conn = self.get_connection()
        try:
            # journal_mode is stored in the file, so this is a no-op after the first run
            mode = conn.execute("PRAGMA journal_mode = WAL").fetchone()
            if not mode or mode[0].lower() != "wal":
                logger.warning("Could not enable WAL journaling", extra={"journal_mode": mode})
            conn.execute(SCHEMA)
            conn.commit()
        finally:
            conn.close()

        logger.info(
            "Metric log store ready",
            extra={"db_path": self.db_path, "busy_timeout_ms": self.busy_timeout}
        )
