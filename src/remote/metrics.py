"""Metrics collection for the remote story fetcher."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class RemoteMetrics:
    """Thread-safe metrics for remote fetch runs.

    Book counters are updated from worker threads.

    Attributes:
        catalog_pages_total: Catalog pages fetched successfully.
        books_attempted: Books handed to workers.
        books_succeeded: Books that produced at least one story.
        books_failed: Books that produced nothing.
        stories_produced: Stories kept after ranking and dedupe.
        fallbacks: Fallback uses by kind (``cache``, ``local``).
    """

    catalog_pages_total: int = 0
    books_attempted: int = 0
    books_succeeded: int = 0
    books_failed: int = 0
    stories_produced: int = 0
    fallbacks: Counter[str] = field(default_factory=Counter)
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["RemoteMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RemoteMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_catalog_page(self) -> None:
        """Record a fetched catalog page."""
        with self._lock:
            self.catalog_pages_total += 1

    def record_book(self, succeeded: bool) -> None:
        """Record the outcome of one book task.

        Args:
            succeeded: Whether the book produced any story.
        """
        with self._lock:
            self.books_attempted += 1
            if succeeded:
                self.books_succeeded += 1
            else:
                self.books_failed += 1

    def record_stories(self, count: int) -> None:
        """Record stories kept by a successful run."""
        with self._lock:
            self.stories_produced += count

    def record_fallback(self, kind: str) -> None:
        """Record a fallback use.

        Args:
            kind: ``cache`` or ``local``.
        """
        with self._lock:
            self.fallbacks[kind] += 1

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "catalog_pages_total": self.catalog_pages_total,
            "books_attempted": self.books_attempted,
            "books_succeeded": self.books_succeeded,
            "books_failed": self.books_failed,
            "stories_produced": self.stories_produced,
            "fallbacks": dict(self.fallbacks),
        }
