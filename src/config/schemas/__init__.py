"""Configuration schemas for the feed engine."""

from src.config.schemas.engine import (
    FeedConfig,
    FeedEngineConfig,
    ImpactConfig,
    PoolConfig,
    RemoteConfig,
)


__all__ = [
    "FeedConfig",
    "FeedEngineConfig",
    "ImpactConfig",
    "PoolConfig",
    "RemoteConfig",
]
