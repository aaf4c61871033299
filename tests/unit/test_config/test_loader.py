"""Unit tests for engine configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.config import ConfigValidationError, load_engine_config
from src.config.schemas import FeedEngineConfig, ImpactConfig, RemoteConfig
from src.settings import AppSettings


class TestSchemaDefaults:
    """Tests for schema defaults and validation."""

    def test_defaults(self) -> None:
        """Test the default engine configuration."""
        config = FeedEngineConfig()

        assert config.feed.batch_size == 24
        assert config.feed.prefetch_threshold == 8
        assert config.feed.initial_batches == 2
        assert config.remote.max_books == 12
        assert config.remote.section_min_chars == 700
        assert config.remote.section_max_chars == 1150
        assert config.pool.keep_threshold == 0.30

    def test_impact_ceiling(self) -> None:
        """Test that default caps add up to 1.0."""
        config = ImpactConfig()
        ceiling = (
            config.length_bonus
            + config.punctuation_cap
            + config.impact_cap
            + config.category_cap
        )

        assert ceiling == pytest.approx(1.0)

    def test_section_bounds_ordered(self) -> None:
        """Test that inverted section bounds are rejected."""
        with pytest.raises(ValidationError):
            RemoteConfig(section_min_chars=1200, section_max_chars=1100)

    def test_unknown_field_rejected(self) -> None:
        """Test that typos in config are caught."""
        with pytest.raises(ValidationError):
            FeedEngineConfig.model_validate({"feed": {"batchsize": 10}})


class TestLoadEngineConfig:
    """Tests for load_engine_config."""

    def test_settings_applied(self) -> None:
        """Test that environment settings flow into the nested schema."""
        settings = AppSettings(batch_size=12, max_books=5, catalog_url="https://x.org/books")

        config = load_engine_config(settings)

        assert config.feed.batch_size == 12
        assert config.remote.max_books == 5
        assert config.remote.catalog_url == "https://x.org/books"

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that FREEREAD_ variables are read."""
        monkeypatch.setenv("FREEREAD_PREFETCH_THRESHOLD", "3")

        config = load_engine_config(AppSettings())

        assert config.feed.prefetch_threshold == 3

    def test_yaml_overrides_settings(self, tmp_path: Path) -> None:
        """Test that the overrides file wins over settings."""
        path = tmp_path / "engine.yaml"
        path.write_text("feed:\n  batch_size: 6\nremote:\n  max_workers: 2\n")

        config = load_engine_config(AppSettings(batch_size=12), path)

        assert config.feed.batch_size == 6
        assert config.remote.max_workers == 2
        assert config.remote.max_books == 12

    def test_invalid_yaml_value(self, tmp_path: Path) -> None:
        """Test that invalid values raise with locations."""
        path = tmp_path / "engine.yaml"
        path.write_text("pool:\n  keep_threshold: 2.5\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_engine_config(AppSettings(), path)

        error = exc_info.value
        assert error.file_path == str(path)
        assert error.errors[0]["location"] == "pool.keep_threshold"
        assert error.errors[0]["type"] == "less_than_equal"

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        """Test that a YAML list is rejected."""
        path = tmp_path / "engine.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_engine_config(AppSettings(), path)

        assert exc_info.value.errors[0]["type"] == "dict_type"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        """Test that an empty overrides file changes nothing."""
        path = tmp_path / "engine.yaml"
        path.write_text("")

        assert load_engine_config(AppSettings(), path) == load_engine_config(AppSettings())
