"""Request counters for the HTTP fetch layer."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar

from src.fetch.models import FetchErrorClass


@dataclass
class FetchMetrics:
    """Process-wide HTTP counters, updated from the book worker threads.

    Attributes:
        requests_by_status: Responses received, keyed by status code.
        retries_total: Attempts beyond the first.
        failures_by_class: Final failures, keyed by FetchErrorClass value.
        bytes_total: Body bytes read.
        duration_ms_total: Wall time across fetch calls, retries included.
    """

    requests_by_status: Counter[int] = field(default_factory=Counter)
    retries_total: int = 0
    failures_by_class: Counter[str] = field(default_factory=Counter)
    bytes_total: int = 0
    duration_ms_total: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, status_code: int, bytes_received: int) -> None:
        with self._lock:
            self.requests_by_status[status_code] += 1
            self.bytes_total += bytes_received

    def record_retry(self) -> None:
        with self._lock:
            self.retries_total += 1

    def record_failure(self, error_class: FetchErrorClass) -> None:
        with self._lock:
            self.failures_by_class[error_class.value] += 1

    def record_duration(self, duration_ms: float) -> None:
        with self._lock:
            self.duration_ms_total += duration_ms

    def to_dict(self) -> dict[str, int | float | dict[str, int]]:
        """Snapshot for the CLI's JSON output; status keys become strings."""
        with self._lock:
            return {
                "requests_by_status": {
                    str(status): count
                    for status, count in sorted(self.requests_by_status.items())
                },
                "retries_total": self.retries_total,
                "failures_by_class": dict(self.failures_by_class),
                "bytes_total": self.bytes_total,
                "duration_ms_total": round(self.duration_ms_total, 2),
            }
