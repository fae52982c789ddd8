"""
Network Configuration Constants

This module contains all constants related to the media search provider
and the HTTP client used to talk to it.
"""

from .system import BASE_SECOND


class NetworkConfig:
    """Network configuration constants."""

    # Timeout settings
    DEFAULT_TIMEOUT = 30 * BASE_SECOND
    CONNECT_TIMEOUT = 10 * BASE_SECOND

    # User agent
    USER_AGENT = "AniPoster/0.1.0"

    # HTTP headers
    ACCEPT_JSON = "application/json"


class JikanConfig:
    """Jikan (MyAnimeList) search provider constants."""

    SEARCH_URL = "https://api.jikan.moe/v4/anime"
    QUERY_PARAM = "q"
    LIMIT_PARAM = "limit"
    RESULT_LIMIT = 5

    # Jikan allows 3 requests per second per client
    REQUESTS_PER_SECOND = 3.0

    # Response fields
    DATA_FIELD = "data"


class RetryConfig:
    """Per-title retry constants for image resolution."""

    MAX_ATTEMPTS_PER_VARIATION = 3
    RETRY_DELAY = 1.0 * BASE_SECOND
    RATE_LIMIT_BACKOFF = 1.0 * BASE_SECOND


class SearchLinks:
    """Web search link used for card click-through."""

    SEARCH_URL = "https://www.google.com/search"
    QUERY_SUFFIX = " anime"
