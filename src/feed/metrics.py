"""Metrics collection for feed sessions."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar


@dataclass
class FeedMetrics:
    """Counters for feed serving.

    Attributes:
        batches_appended: Batches added to rendered feeds.
        items_served: Items drawn from active pools.
        reshuffles: Times an exhausted active pool was reshuffled.
        rebuilds: Active pool rebuilds (filter changes, pool swaps).
        category_fallbacks: Rebuilds where the filter matched nothing.
        likes_toggled: Like toggles persisted.
    """

    batches_appended: int = 0
    items_served: int = 0
    reshuffles: int = 0
    rebuilds: int = 0
    category_fallbacks: int = 0
    likes_toggled: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["FeedMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FeedMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_batch(self) -> None:
        """Record an appended batch."""
        with self._lock:
            self.batches_appended += 1

    def record_served(self, count: int) -> None:
        """Record items drawn from an active pool."""
        with self._lock:
            self.items_served += count

    def record_reshuffle(self) -> None:
        """Record a reshuffle on pool exhaustion."""
        with self._lock:
            self.reshuffles += 1

    def record_rebuild(self, fell_back: bool) -> None:
        """Record an active pool rebuild.

        Args:
            fell_back: Whether the category filter matched nothing.
        """
        with self._lock:
            self.rebuilds += 1
            if fell_back:
                self.category_fallbacks += 1

    def record_like_toggle(self) -> None:
        """Record a persisted like toggle."""
        with self._lock:
            self.likes_toggled += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "batches_appended": self.batches_appended,
            "items_served": self.items_served,
            "reshuffles": self.reshuffles,
            "rebuilds": self.rebuilds,
            "category_fallbacks": self.category_fallbacks,
            "likes_toggled": self.likes_toggled,
        }
