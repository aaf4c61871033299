"""Key-value blob stores: the protocol, an in-memory store and a SQLite store."""

import sqlite3
import time
from pathlib import Path
from threading import Lock
from typing import Protocol

import structlog

from src.config.constants import COMPONENT_STORE
from src.store.errors import ConnectionError as StoreConnectionError
from src.store.errors import StoreOperationError
from src.store.metrics import StoreMetrics


logger = structlog.get_logger()

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    updated_at REAL NOT NULL
)
"""


class KeyValueStore(Protocol):
    """Blob persistence injected into the feed session and remote fetcher.

    Writes are full-blob overwrites, so repeating a write is harmless.
    """

    def get_blob(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None."""
        ...

    def set_blob(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...


class InMemoryKeyValueStore:
    """Process-local store for tests and previews."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional pre-populated blobs.
        """
        self._data: dict[str, bytes] = dict(initial or {})
        self._lock = Lock()
        self._metrics = StoreMetrics.get_instance()

    def get_blob(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None."""
        with self._lock:
            value = self._data.get(key)
        self._metrics.record_read(hit=value is not None)
        return value

    def set_blob(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``."""
        with self._lock:
            self._data[key] = value
        self._metrics.record_write()

    def keys(self) -> list[str]:
        """Stored keys, sorted."""
        with self._lock:
            return sorted(self._data)


class SqliteKeyValueStore:
    """SQLite-backed blob store.

    Uses a single table keyed by name. The connection is shared across
    threads and serialized with a lock; WAL mode keeps readers from
    blocking the writer.
    """

    def __init__(self, db_path: Path | str, busy_timeout_seconds: float = 5.0) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
            busy_timeout_seconds: How long to wait for a lock held by another
                connection before an operation fails.
        """
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._busy_timeout = busy_timeout_seconds
        self._conn: sqlite3.Connection | None = None
        self._lock = Lock()
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(
            component=COMPONENT_STORE,
            db_path=str(self._db_path),
        )

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open the database and create the table if needed.

        Creates the database file and parent directories if they don't exist.
        """
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._log.info("connecting_to_database")

        self._conn = sqlite3.connect(
            str(self._db_path),
            timeout=self._busy_timeout,
            check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._conn.execute(_SCHEMA)
        self._conn.commit()

        self._log.info("database_connected")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log.info("database_closed")

    def __enter__(self) -> "SqliteKeyValueStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database is connected.

        Returns:
            The database connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    def get_blob(self, key: str) -> bytes | None:
        """Return the blob stored under ``key``, or None.

        Raises:
            StoreConnectionError: If not connected.
            StoreOperationError: If SQLite rejects the read.
        """
        conn = self._ensure_connected()
        with self._lock:
            try:
                row = conn.execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as e:
                self._log.error("blob_read_failed", key=key, error=str(e))
                raise StoreOperationError("get_blob", key, e) from e
        self._metrics.record_read(hit=row is not None)
        return bytes(row[0]) if row is not None else None

    def set_blob(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key`` in its own transaction.

        Raises:
            StoreConnectionError: If not connected.
            StoreOperationError: If SQLite rejects the write; the
                transaction is rolled back.
        """
        conn = self._ensure_connected()
        start_ns = time.perf_counter_ns()
        with self._lock:
            try:
                conn.execute(
                    """
                    INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE
                    SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, sqlite3.Binary(value), time.time()),
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                self._log.error(
                    "blob_write_failed", key=key, bytes=len(value), error=str(e)
                )
                raise StoreOperationError("set_blob", key, e) from e

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_write()
        self._metrics.record_tx_duration(duration_ms)
        self._log.debug(
            "blob_written",
            key=key,
            bytes=len(value),
            duration_ms=round(duration_ms, 2),
        )

    def keys(self) -> list[str]:
        """Stored keys, sorted.

        Raises:
            StoreConnectionError: If not connected.
            StoreOperationError: If SQLite rejects the read.
        """
        conn = self._ensure_connected()
        with self._lock:
            try:
                rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
            except sqlite3.Error as e:
                raise StoreOperationError("keys", None, e) from e
        return [row[0] for row in rows]
