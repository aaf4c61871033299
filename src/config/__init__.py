"""Configuration loading and validation module."""

from src.config.errors import ConfigValidationError
from src.config.loader import load_engine_config
from src.config.schemas import (
    FeedConfig,
    FeedEngineConfig,
    ImpactConfig,
    PoolConfig,
    RemoteConfig,
)


__all__ = [
    "ConfigValidationError",
    "FeedConfig",
    "FeedEngineConfig",
    "ImpactConfig",
    "PoolConfig",
    "RemoteConfig",
    "load_engine_config",
]
