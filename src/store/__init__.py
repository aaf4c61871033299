"""Key-value persistence for liked items and cached remote stories.

This module provides:
- A blob-store protocol injected into the feed engine
- In-memory and SQLite implementations
- Typed repositories that decode malformed values to empty results
"""

from src.store.errors import ConnectionError, StateStoreError, StoreOperationError
from src.store.kv import InMemoryKeyValueStore, KeyValueStore, SqliteKeyValueStore
from src.store.metrics import StoreMetrics
from src.store.repositories import LikedItemsRepository, StoryCacheRepository


__all__ = [
    # Errors
    "ConnectionError",
    "StateStoreError",
    "StoreOperationError",
    # Stores
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqliteKeyValueStore",
    # Metrics
    "StoreMetrics",
    # Repositories
    "LikedItemsRepository",
    "StoryCacheRepository",
]
