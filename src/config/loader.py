"""Engine configuration assembly from settings and optional YAML overrides."""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from src.config.constants import COMPONENT_CONFIG
from src.config.errors import ConfigValidationError
from src.config.schemas.engine import FeedEngineConfig
from src.settings import AppSettings


logger = structlog.get_logger()


def _settings_overrides(settings: AppSettings) -> dict[str, dict[str, Any]]:
    """Map flat environment settings onto the nested engine schema."""
    return {
        "pool": {"app_attribution": settings.app_attribution},
        "remote": {
            "catalog_url": settings.catalog_url,
            "max_pages": settings.max_pages,
            "max_books": settings.max_books,
            "max_workers": settings.max_workers,
        },
        "feed": {
            "batch_size": settings.batch_size,
            "prefetch_threshold": settings.prefetch_threshold,
        },
        "fetch": {
            "user_agent": settings.user_agent,
            "timeout_seconds": settings.request_timeout_seconds,
        },
    }


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` recursively, returning a new dict."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_engine_config(
    settings: AppSettings | None = None,
    overrides_path: Path | None = None,
) -> FeedEngineConfig:
    """Build the engine configuration.

    Precedence, lowest first: schema defaults, environment settings, YAML
    overrides file.

    Args:
        settings: Environment settings (loaded when omitted).
        overrides_path: Optional YAML file with nested overrides.

    Returns:
        Validated, frozen FeedEngineConfig.

    Raises:
        ConfigValidationError: If the merged configuration is invalid.
        FileNotFoundError: If ``overrides_path`` does not exist.
    """
    settings = settings or AppSettings()
    data: dict[str, Any] = _settings_overrides(settings)
    source = "environment"

    if overrides_path is not None:
        parsed = yaml.safe_load(overrides_path.read_text(encoding="utf-8")) or {}
        if not isinstance(parsed, dict):
            raise ConfigValidationError(
                [{"location": "", "type": "dict_type", "message": "Expected a mapping"}],
                str(overrides_path),
            )
        data = _deep_merge(data, parsed)
        source = str(overrides_path)

    try:
        config = FeedEngineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError.from_validation_error(e, source) from e

    logger.bind(component=COMPONENT_CONFIG).debug(
        "engine_config_loaded",
        source=source,
        batch_size=config.feed.batch_size,
        max_books=config.remote.max_books,
    )
    return config
