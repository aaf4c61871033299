"""Error types for the remote story fetcher."""

from enum import Enum


class RemoteErrorClass(str, Enum):
    """Classification of remote fetch failures.

    - CATALOG: The book catalog could not be listed
    - BOOK_TEXT: A book's plain text could not be downloaded or decoded
    - CANCELLED: The caller cancelled the fetch
    - EMPTY: Every book was fetched but none yielded a story
    """

    CATALOG = "CATALOG"
    BOOK_TEXT = "BOOK_TEXT"
    CANCELLED = "CANCELLED"
    EMPTY = "EMPTY"


class RemoteFetchError(Exception):
    """Base exception for remote fetch errors.

    Provides structured error information for logging. These errors never
    escape ``RemoteStoryFetcher.fetch_stories``; they select a fallback.
    """

    def __init__(
        self,
        error_class: RemoteErrorClass,
        message: str,
        book_id: int | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize the remote fetch error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            book_id: Catalog id of the book involved, if any.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.book_id = book_id
        self.details = details or {}

    def to_dict(
        self,
    ) -> dict[str, str | int | bool | None | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "book_id": self.book_id,
            "details": self.details,
        }


class CatalogUnavailableError(RemoteFetchError):
    """The catalog returned no usable page."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        fetch_error: str | None = None,
    ) -> None:
        """Initialize the catalog error.

        Args:
            message: Human-readable error message.
            url: Catalog page URL that failed.
            status_code: HTTP status, when a response was received.
            fetch_error: Fetch-layer error class, when the request failed.
        """
        details: dict[str, str | int | bool | None] = {}
        if url is not None:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        if fetch_error is not None:
            details["fetch_error"] = fetch_error
        super().__init__(RemoteErrorClass.CATALOG, message, details=details)


class BookTextUnavailableError(RemoteFetchError):
    """A single book's text could not be used."""

    def __init__(
        self,
        message: str,
        book_id: int,
        url: str | None = None,
        fetch_error: str | None = None,
    ) -> None:
        """Initialize the book text error.

        Args:
            message: Human-readable error message.
            book_id: Catalog id of the book.
            url: Text URL that failed.
            fetch_error: Fetch-layer error class, when the request failed.
        """
        details: dict[str, str | int | bool | None] = {}
        if url is not None:
            details["url"] = url
        if fetch_error is not None:
            details["fetch_error"] = fetch_error
        super().__init__(
            RemoteErrorClass.BOOK_TEXT, message, book_id=book_id, details=details
        )


class FetchCancelledError(RemoteFetchError):
    """The caller cancelled the fetch."""

    def __init__(self, message: str = "Remote fetch cancelled") -> None:
        """Initialize the cancellation error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(RemoteErrorClass.CANCELLED, message)


class NoStoriesExtractedError(RemoteFetchError):
    """The run completed but produced no stories."""

    def __init__(self, books_attempted: int) -> None:
        """Initialize the empty-result error.

        Args:
            books_attempted: Number of candidate books processed.
        """
        super().__init__(
            RemoteErrorClass.EMPTY,
            "No stories extracted from any candidate book",
            details={"books_attempted": books_attempted},
        )
