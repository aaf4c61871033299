"""Loader for the packaged passage library and curated stories."""

from functools import lru_cache
from importlib import resources
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.config.errors import ConfigValidationError
from src.library.models import CuratedStory, Passage


logger = structlog.get_logger()

PASSAGES_RESOURCE = "passages.yaml"
CURATED_RESOURCE = "curated.yaml"


class PassageLibraryFile(BaseModel):
    """Top-level shape of ``passages.yaml``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    passages: list[Passage] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "PassageLibraryFile":
        """Passage ids feed into item ids, so they must be unique."""
        ids = [p.id for p in self.passages]
        if len(ids) != len(set(ids)):
            msg = "Duplicate passage ids in library"
            raise ValueError(msg)
        return self


class CuratedStoriesFile(BaseModel):
    """Top-level shape of ``curated.yaml``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    stories: list[CuratedStory] = Field(default_factory=list)


def _read_yaml(path: Path | None, resource_name: str) -> tuple[object, str]:
    """Read YAML from an explicit path or the packaged data directory."""
    if path is not None:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}, str(path)
    resource = resources.files("src.library").joinpath("data", resource_name)
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}, resource_name


def load_passages(path: Path | None = None) -> tuple[Passage, ...]:
    """Load and validate the passage library.

    Args:
        path: Optional YAML file; the packaged library is used when omitted.

    Returns:
        Passages in file order.

    Raises:
        ConfigValidationError: If the file does not match the schema.
    """
    data, source = _read_yaml(path, PASSAGES_RESOURCE)
    try:
        library = PassageLibraryFile.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError.from_validation_error(e, source) from e

    logger.bind(component="library").debug(
        "passages_loaded", source=source, passage_count=len(library.passages)
    )
    return tuple(library.passages)


def load_curated_stories(path: Path | None = None) -> tuple[CuratedStory, ...]:
    """Load and validate the curated editorial stories.

    Args:
        path: Optional YAML file; the packaged stories are used when omitted.

    Returns:
        Curated stories in file order.

    Raises:
        ConfigValidationError: If the file does not match the schema.
    """
    data, source = _read_yaml(path, CURATED_RESOURCE)
    try:
        curated = CuratedStoriesFile.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError.from_validation_error(e, source) from e
    return tuple(curated.stories)


@lru_cache(maxsize=1)
def default_library() -> tuple[Passage, ...]:
    """The packaged passage library, loaded once per process."""
    return load_passages()


@lru_cache(maxsize=1)
def default_curated_stories() -> tuple[CuratedStory, ...]:
    """The packaged curated stories, loaded once per process."""
    return load_curated_stories()
