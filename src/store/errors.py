"""Domain exceptions for key-value persistence.

Infrastructure failures (the SQLite file cannot be opened, the store is used
before ``connect()``) raise; malformed stored values do not, the repositories
decode them to empty results instead.
"""


class StateStoreError(Exception):
    """Base exception for all key-value store errors."""


class ConnectionError(StateStoreError):
    """Raised when the SQLite store is used without an open connection."""

    def __init__(self, message: str = "Database not connected") -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class StoreOperationError(StateStoreError):
    """Raised when SQLite rejects a read or write (locked, read-only, corrupt)."""

    def __init__(self, operation: str, key: str | None, cause: Exception) -> None:
        """Initialize the operation error.

        Args:
            operation: Store operation that failed (e.g. 'set_blob').
            key: Key involved, if any.
            cause: Underlying sqlite3 error.
        """
        self.operation = operation
        self.key = key
        target = f" for key {key!r}" if key is not None else ""
        super().__init__(f"{operation} failed{target}: {cause}")
