"""Result, error and retry models returned by HttpFetcher."""

import random
from enum import Enum
from typing import Annotated, Final

from pydantic import Field

from src.data_model import StrictBaseModel
from src.fetch.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN


class FetchErrorClass(str, Enum):
    """Why a catalog page or book download failed.

    Drives retry decisions and the per-class failure counters.
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    RESPONSE_SIZE_EXCEEDED = "RESPONSE_SIZE_EXCEEDED"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    RATE_LIMITED = "RATE_LIMITED"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"


# Transient failures; 4xx, oversize bodies and cancellation are final.
RETRYABLE_ERROR_CLASSES: Final[frozenset[FetchErrorClass]] = frozenset(
    {
        FetchErrorClass.NETWORK_TIMEOUT,
        FetchErrorClass.CONNECTION_ERROR,
        FetchErrorClass.HTTP_5XX,
        FetchErrorClass.RATE_LIMITED,
    }
)


class FetchError(StrictBaseModel):
    """Failure attached to a FetchResult.

    Attributes:
        error_class: Failure classification.
        message: Short description for logs.
        status_code: Response status, when a response arrived.
        retry_after: Seconds requested by a 429 ``Retry-After`` header.
    """

    error_class: FetchErrorClass
    message: Annotated[str, Field(min_length=1)]
    status_code: int | None = None
    retry_after: int | None = None


class FetchResult(StrictBaseModel):
    """Outcome of one fetch, successful or not.

    The fetcher never raises; a request that got no response at all carries
    ``status_code=0`` and an error.
    """

    status_code: Annotated[int, Field(ge=0, le=599)]
    final_url: Annotated[str, Field(min_length=1)]
    headers: dict[str, str] = Field(default_factory=dict)
    body_bytes: bytes = b""
    error: FetchError | None = None

    @property
    def is_success(self) -> bool:
        """2xx status and no error."""
        return (
            self.error is None
            and HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX
        )

    @property
    def body_size(self) -> int:
        return len(self.body_bytes)

    def text(self) -> str:
        """Body decoded as UTF-8; book texts with stray bytes still decode."""
        return self.body_bytes.decode("utf-8", errors="replace")


class RetryPolicy(StrictBaseModel):
    """Exponential backoff with jitter for transient failures.

    The delay before retry ``n`` (0-based) is
    ``min(base_delay_ms * exponential_base ** n, max_delay_ms)`` plus up to
    ``jitter_factor`` of that delay.
    """

    max_retries: Annotated[int, Field(ge=0, le=10)] = 2
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = 500
    max_delay_ms: Annotated[int, Field(ge=0, le=300000)] = 8000
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = 2.0
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.1

    def should_retry(self, error: FetchError, attempt: int) -> bool:
        """Whether ``attempt`` (0-based) may be followed by another one."""
        return attempt < self.max_retries and error.error_class in RETRYABLE_ERROR_CLASSES

    def get_delay_ms(self, attempt: int) -> int:
        """Backoff in milliseconds before the retry following ``attempt``."""
        delay = min(self.base_delay_ms * self.exponential_base**attempt, self.max_delay_ms)
        return int(delay * (1 + self.jitter_factor * random.random()))  # noqa: S311


class ResponseSizeExceededError(Exception):
    """A response body grew past ``max_response_size_bytes``."""
