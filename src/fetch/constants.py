"""HTTP constants for the fetch layer."""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Plain-text book bodies run to a few MB; catalog pages are far smaller.
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 8 * 1024 * 1024

DEFAULT_CHUNK_SIZE = 8192

# Cap on honoring Retry-After (seconds)
MAX_RETRY_AFTER_SECONDS = 30

DEFAULT_USER_AGENT = "freeread-feed/1.0 (+https://readtounlock.app)"
