"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.constants import DEFAULT_APP_ATTRIBUTION
from src.fetch.constants import DEFAULT_USER_AGENT


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be overridden with a ``FREEREAD_``-prefixed environment
    variable or a ``.env`` file, e.g. ``FREEREAD_BATCH_SIZE=12``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FREEREAD_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    catalog_url: str = "https://gutendex.com/books"
    state_path: Path = Path("state/freeread.sqlite")
    user_agent: str = DEFAULT_USER_AGENT
    app_attribution: str = DEFAULT_APP_ATTRIBUTION
    request_timeout_seconds: float = Field(default=20.0, gt=0.0, le=300.0)
    batch_size: int = Field(default=24, ge=1, le=500)
    prefetch_threshold: int = Field(default=8, ge=0, le=500)
    max_pages: int = Field(default=3, ge=1, le=20)
    max_books: int = Field(default=12, ge=1, le=100)
    max_workers: int = Field(default=4, ge=1, le=32)
    feed_seed: int | None = None
