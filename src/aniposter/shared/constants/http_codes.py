"""HTTP Status Code Constants.

This module contains HTTP status code constants for clear and
type-safe handling of API responses and network operations.
"""


class HTTPStatusCodes:
    """HTTP status code constants."""

    TOO_MANY_REQUESTS = 429

    @staticmethod
    def is_success(code: int) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= code < 300


class HTTPHeaders:
    """Common HTTP header names."""

    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"
    RETRY_AFTER = "Retry-After"
