"""Metrics collection for key-value persistence."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class StoreMetrics:
    """Metrics for blob reads, writes and decode failures.

    Attributes:
        blob_reads_total: Blob reads, hits and misses included.
        blob_misses_total: Reads of keys with no stored value.
        blob_writes_total: Blob writes.
        decode_failures_total: Stored values that could not be decoded.
        tx_duration_ms: Cumulative SQLite write duration in milliseconds.
        tx_count: Number of SQLite write transactions.
    """

    blob_reads_total: int = 0
    blob_misses_total: int = 0
    blob_writes_total: int = 0
    decode_failures_total: int = 0
    tx_duration_ms: float = 0.0
    tx_count: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_read(self, hit: bool) -> None:
        """Record a blob read.

        Args:
            hit: Whether a value was stored under the key.
        """
        with self._lock:
            self.blob_reads_total += 1
            if not hit:
                self.blob_misses_total += 1

    def record_write(self) -> None:
        """Record a blob write."""
        with self._lock:
            self.blob_writes_total += 1

    def record_decode_failure(self) -> None:
        """Record a stored value that failed to decode."""
        with self._lock:
            self.decode_failures_total += 1

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record transaction duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        with self._lock:
            self.tx_duration_ms += duration_ms
            self.tx_count += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "blob_reads_total": self.blob_reads_total,
            "blob_misses_total": self.blob_misses_total,
            "blob_writes_total": self.blob_writes_total,
            "decode_failures_total": self.decode_failures_total,
            "tx_duration_ms": self.tx_duration_ms,
            "tx_count": self.tx_count,
        }
