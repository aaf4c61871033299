"""HTTP client with retries, size limits, and cancellation."""

import threading
import time
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from io import BytesIO
from urllib.parse import urlparse

import httpx
import structlog

from src.fetch.config import FetchConfig
from src.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    MAX_RETRY_AFTER_SECONDS,
)
from src.fetch.metrics import FetchMetrics
from src.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
)


logger = structlog.get_logger()


class HttpFetcher:
    """HTTP GET client that never raises.

    Every outcome, including timeouts and cancellation, comes back as a
    FetchResult; callers inspect ``result.error`` to decide how to degrade.
    The underlying ``httpx.Client`` is thread-safe and shared by the remote
    fetch workers.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP fetcher.

        Args:
            config: Fetch configuration.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self._config = config or FetchConfig()
        self._metrics = FetchMetrics.get_instance()
        self._client = httpx.Client(
            timeout=self._config.timeout_seconds,
            follow_redirects=True,
            transport=transport,
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": "*/*",
            },
        )
        self._log = logger.bind(component="fetch")

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def __enter__(self) -> "HttpFetcher":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def fetch(
        self,
        url: str,
        params: dict[str, str] | None = None,
        cancel: threading.Event | None = None,
    ) -> FetchResult:
        """Fetch a URL with retry support.

        Args:
            url: The URL to fetch.
            params: Optional query parameters.
            cancel: Event that, once set, stops further attempts.

        Returns:
            FetchResult with status, body, or error information.
        """
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(url=url, domain=urlparse(url).netloc)

        result = self._execute_with_retry(url, params, cancel, log)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(duration_ms)

        log.info(
            "fetch_complete",
            status_code=result.status_code,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
            error_class=result.error.error_class.value if result.error else None,
        )

        return result

    def _execute_with_retry(
        self,
        url: str,
        params: dict[str, str] | None,
        cancel: threading.Event | None,
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute request with retry logic.

        Backoff sleeps wait on the cancel event so a cancelled fetch returns
        promptly instead of finishing its delay.
        """
        policy = self._config.retry_policy
        last_error: FetchError | None = None

        for attempt in range(policy.max_retries + 1):
            if attempt > 0:
                delay_ms = policy.get_delay_ms(attempt - 1)
                self._metrics.record_retry()
                log.debug(
                    "retry_attempt",
                    attempt=attempt,
                    delay_ms=delay_ms,
                    max_retries=policy.max_retries,
                )
                if self._wait(delay_ms / 1000.0, cancel):
                    break

            if cancel is not None and cancel.is_set():
                break

            result = self._execute_single(url, params, log.bind(attempt=attempt))

            if result.error is None or not policy.should_retry(result.error, attempt):
                if result.error is not None:
                    self._metrics.record_failure(result.error.error_class)
                return result

            last_error = result.error

            if result.error.error_class == FetchErrorClass.RATE_LIMITED:
                retry_after = result.error.retry_after
                if retry_after and retry_after > 0:
                    log.info("rate_limited", retry_after=retry_after, attempt=attempt)
                    if self._wait(min(retry_after, MAX_RETRY_AFTER_SECONDS), cancel):
                        break

        if cancel is not None and cancel.is_set():
            last_error = FetchError(
                error_class=FetchErrorClass.CANCELLED,
                message="Fetch cancelled by caller",
            )

        error = last_error or FetchError(
            error_class=FetchErrorClass.UNKNOWN, message="No attempt was made"
        )
        self._metrics.record_failure(error.error_class)
        return FetchResult(
            status_code=error.status_code or 0,
            final_url=url,
            error=error,
        )

    @staticmethod
    def _wait(seconds: float, cancel: threading.Event | None) -> bool:
        """Sleep for ``seconds``; return True if cancelled meanwhile."""
        if cancel is None:
            time.sleep(seconds)
            return False
        return cancel.wait(seconds)

    def _execute_single(
        self,
        url: str,
        params: dict[str, str] | None,
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute a single HTTP request.

        Args:
            url: URL to fetch.
            params: Query parameters.
            log: Bound logger.

        Returns:
            FetchResult from the request.
        """
        try:
            with self._client.stream("GET", url, params=params) as response:
                content_length = response.headers.get("content-length")
                if content_length and content_length.isdigit():
                    size = int(content_length)
                    if size > self._config.max_response_size_bytes:
                        return self._error_result(
                            url,
                            FetchErrorClass.RESPONSE_SIZE_EXCEEDED,
                            f"Response size {size} exceeds limit "
                            f"{self._config.max_response_size_bytes}",
                            status_code=response.status_code,
                        )

                body = self._read_body_with_limit(response)
                self._metrics.record_request(response.status_code, len(body))

                http_error = self._classify_http_error(
                    response.status_code, response.headers
                )
                return FetchResult(
                    status_code=response.status_code,
                    final_url=str(response.url),
                    headers=dict(response.headers),
                    body_bytes=body,
                    error=http_error,
                )

        except ResponseSizeExceededError as e:
            return self._error_result(
                url, FetchErrorClass.RESPONSE_SIZE_EXCEEDED, str(e)
            )

        except httpx.TimeoutException as e:
            return self._error_result(
                url, FetchErrorClass.NETWORK_TIMEOUT, f"Request timed out: {e}"
            )

        except httpx.ConnectError as e:
            return self._error_result(
                url, FetchErrorClass.CONNECTION_ERROR, f"Connection failed: {e}"
            )

        except Exception as e:  # noqa: BLE001
            log.warning("fetch_unexpected_error", error=str(e))
            return self._error_result(
                url, FetchErrorClass.UNKNOWN, f"Unexpected error: {e}"
            )

    @staticmethod
    def _error_result(
        url: str,
        error_class: FetchErrorClass,
        message: str,
        status_code: int | None = None,
    ) -> FetchResult:
        """Build a FetchResult carrying only an error."""
        return FetchResult(
            status_code=status_code or 0,
            final_url=url,
            error=FetchError(
                error_class=error_class,
                message=message,
                status_code=status_code,
            ),
        )

    def _read_body_with_limit(self, response: httpx.Response) -> bytes:
        """Read response body with size limit.

        Raises:
            ResponseSizeExceededError: If the body exceeds the configured limit.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()

    def _classify_http_error(
        self,
        status_code: int,
        headers: httpx.Headers,
    ) -> FetchError | None:
        """Classify HTTP status code as error.

        Returns:
            FetchError if status indicates error, None otherwise.
        """
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            return FetchError(
                error_class=FetchErrorClass.RATE_LIMITED,
                message="Rate limited (429 Too Many Requests)",
                status_code=status_code,
                retry_after=self._parse_retry_after(headers.get("retry-after")),
            )

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            return FetchError(
                error_class=FetchErrorClass.HTTP_4XX,
                message=f"Client error ({status_code})",
                status_code=status_code,
            )

        if HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
            return FetchError(
                error_class=FetchErrorClass.HTTP_5XX,
                message=f"Server error ({status_code})",
                status_code=status_code,
            )

        return FetchError(
            error_class=FetchErrorClass.UNKNOWN,
            message=f"Unexpected status ({status_code})",
            status_code=status_code,
        )

    def _parse_retry_after(self, value: str | None) -> int | None:
        """Parse Retry-After header value (seconds or HTTP date)."""
        if not value:
            return None

        try:
            return int(value)
        except ValueError:
            pass

        try:
            dt = parsedate_to_datetime(value)
            delta = dt - datetime.now(UTC)
            return max(0, int(delta.total_seconds()))
        except (ValueError, TypeError):
            pass

        return None
