"""API configuration models (Jikan, etc.).

This module contains configuration models for the external media search
provider used to resolve poster images.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from aniposter.shared.constants import JikanConfig, NetworkConfig, RetryConfig


class JikanSettings(BaseModel):
    """Jikan search provider configuration.

    Controls the search endpoint, page size, per-variation retry budget,
    backoff and client-side request pacing.
    """

    search_url: str = Field(
        default=JikanConfig.SEARCH_URL,
        description="Anime search endpoint",
    )
    result_limit: int = Field(
        default=JikanConfig.RESULT_LIMIT,
        gt=0,
        le=25,
        description="Maximum candidates requested per search",
    )
    timeout: float = Field(
        default=NetworkConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    max_attempts_per_variation: int = Field(
        default=RetryConfig.MAX_ATTEMPTS_PER_VARIATION,
        gt=0,
        description="Attempts per search variation before moving to the next one",
    )
    retry_delay: float = Field(
        default=RetryConfig.RETRY_DELAY,
        ge=0,
        description="Delay after a failed attempt in seconds",
    )
    rate_limit_backoff: float = Field(
        default=RetryConfig.RATE_LIMIT_BACKOFF,
        ge=0,
        description="Delay after an HTTP 429 in seconds",
    )
    requests_per_second: float = Field(
        default=JikanConfig.REQUESTS_PER_SECOND,
        gt=0,
        description="Client-side request pacing",
    )
    verify_images: bool = Field(
        default=True,
        description="Download and decode matched images before accepting them",
    )


class APISettings(BaseModel):
    """API configuration container.

    Note: Environment variable loading is handled by the parent Settings class.
    """

    jikan: JikanSettings = Field(
        default_factory=JikanSettings,
        description="Jikan API configuration",
    )


__all__ = [
    "APISettings",
    "JikanSettings",
]
