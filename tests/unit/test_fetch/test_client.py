"""Unit tests for HttpFetcher using an in-process transport."""

import json
import threading
from collections.abc import Generator

import httpx
import pytest

from src.fetch.client import HttpFetcher
from src.fetch.config import FetchConfig
from src.fetch.metrics import FetchMetrics
from src.fetch.models import FetchErrorClass, RetryPolicy


NO_WAIT_POLICY = RetryPolicy(max_retries=2, base_delay_ms=0, jitter_factor=0.0)


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None, None, None]:
    """Reset the fetch metrics singleton around each test."""
    FetchMetrics.reset()
    yield
    FetchMetrics.reset()


def make_fetcher(
    handler: object,
    **config: object,
) -> HttpFetcher:
    """Build a fetcher whose requests are answered by ``handler``."""
    fetch_config = FetchConfig(retry_policy=NO_WAIT_POLICY, **config)  # type: ignore[arg-type]
    return HttpFetcher(fetch_config, transport=httpx.MockTransport(handler))  # type: ignore[arg-type]


class TestSuccessfulFetch:
    """Tests for successful requests."""

    def test_returns_body_and_status(self) -> None:
        """Test that a 200 response yields its body."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"hello world")

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/book.txt")

        assert result.is_success
        assert result.status_code == 200
        assert result.text() == "hello world"
        assert result.error is None

    def test_passes_query_params(self) -> None:
        """Test that query parameters reach the server."""
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"ok": True})

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/books", params={"sort": "popular"})

        assert json.loads(result.body_bytes) == {"ok": True}
        assert seen[0].params["sort"] == "popular"

    def test_sends_user_agent(self) -> None:
        """Test that the configured user agent is sent."""
        agents: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            agents.append(request.headers["user-agent"])
            return httpx.Response(200)

        with make_fetcher(handler, user_agent="test-agent/1.0") as fetcher:
            fetcher.fetch("https://example.org/")

        assert agents == ["test-agent/1.0"]


class TestErrorClassification:
    """Tests for failed requests."""

    def test_404_not_retried(self) -> None:
        """Test that client errors return immediately."""
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(404)

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/missing")

        assert not result.is_success
        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.HTTP_4XX
        assert len(calls) == 1

    def test_500_retried_then_succeeds(self) -> None:
        """Test that a server error is retried."""
        responses = iter([httpx.Response(503), httpx.Response(200, content=b"ok")])

        def handler(request: httpx.Request) -> httpx.Response:
            return next(responses)

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/flaky")

        assert result.is_success
        assert FetchMetrics.get_instance().retries_total == 1

    def test_500_exhausts_retries(self) -> None:
        """Test that persistent server errors give up after max_retries."""
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(500)

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/down")

        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.HTTP_5XX
        assert len(calls) == 3
        metrics = FetchMetrics.get_instance().to_dict()
        assert metrics["retries_total"] == 2
        assert metrics["failures_by_class"] == {"HTTP_5XX": 1}

    def test_connect_error_classified(self) -> None:
        """Test that connection failures become CONNECTION_ERROR."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/")

        assert result.status_code == 0
        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.CONNECTION_ERROR

    def test_timeout_classified(self) -> None:
        """Test that timeouts become NETWORK_TIMEOUT."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/")

        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.NETWORK_TIMEOUT

    def test_oversized_response_rejected(self) -> None:
        """Test that bodies above the limit are rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"x" * 4096)

        with make_fetcher(handler, max_response_size_bytes=1024) as fetcher:
            result = fetcher.fetch("https://example.org/huge.txt")

        assert not result.is_success
        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.RESPONSE_SIZE_EXCEEDED


class TestCancellation:
    """Tests for caller cancellation."""

    def test_cancelled_before_start(self) -> None:
        """Test that a set cancel event prevents any request."""
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(200)

        cancel = threading.Event()
        cancel.set()
        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/", cancel=cancel)

        assert calls == []
        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.CANCELLED

    def test_cancel_stops_retries(self) -> None:
        """Test that cancelling during a failure stops further attempts."""
        cancel = threading.Event()
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            cancel.set()
            return httpx.Response(503)

        with make_fetcher(handler) as fetcher:
            result = fetcher.fetch("https://example.org/", cancel=cancel)

        assert len(calls) == 1
        assert result.error is not None
        assert result.error.error_class == FetchErrorClass.CANCELLED
