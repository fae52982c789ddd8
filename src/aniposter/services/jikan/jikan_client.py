"""Async Jikan (MyAnimeList) client for poster resolution.

Searches the public Jikan anime endpoint with aiohttp and verifies that a
matched poster URL actually serves a decodable image. Requests are paced
client-side with an AsyncLimiter; every failure surfaces as one of the two
per-attempt error types the resolver understands.
"""

from __future__ import annotations

import asyncio
import logging
import time
from io import BytesIO
from types import TracebackType
from typing import Any

import aiohttp
from aiolimiter import AsyncLimiter
from PIL import Image
from pydantic import ValidationError

from aniposter.config.models.api_settings import JikanSettings
from aniposter.shared.constants import (
    MILLIS_PER_SECOND,
    HTTPHeaders,
    HTTPStatusCodes,
    JikanConfig,
    NetworkConfig,
)
from aniposter.shared.errors import (
    ErrorCode,
    ProviderRateLimitedError,
    create_transient_error,
)
from aniposter.shared.logging import log_api_call
from aniposter.shared.models.api.jikan import ProviderResult, SearchResponse

logger = logging.getLogger(__name__)


def _parse_retry_after(headers: Any) -> float | None:
    value = headers.get(HTTPHeaders.RETRY_AFTER) if headers else None
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def decode_image(data: bytes) -> tuple[int, int]:
    """Decode image bytes with Pillow.

    Args:
        data: Raw image bytes

    Returns:
        (width, height) of the decoded image

    Raises:
        OSError, SyntaxError, ValueError: If Pillow cannot decode the data
    """
    with Image.open(BytesIO(data)) as img:
        img.verify()
        return img.size


class JikanClient:
    """Jikan anime search client.

    Owns an aiohttp session unless one is injected. Use as an async context
    manager, or call :meth:`close` when done.

    Example:
        >>> async with JikanClient() as client:
        ...     results = await client.search("Death Note", limit=5)
    """

    def __init__(
        self,
        settings: JikanSettings | None = None,
        session: aiohttp.ClientSession | None = None,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Provider settings; defaults are used when omitted
            session: Existing aiohttp session (not closed by this client)
            limiter: Shared request limiter
        """
        self.settings = settings or JikanSettings()
        self._session = session
        self._owns_session = session is None
        self._limiter = limiter or AsyncLimiter(self.settings.requests_per_second, 1)

    async def __aenter__(self) -> JikanClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=self.settings.timeout,
                    connect=NetworkConfig.CONNECT_TIMEOUT,
                ),
                headers={
                    HTTPHeaders.USER_AGENT: NetworkConfig.USER_AGENT,
                    HTTPHeaders.ACCEPT: NetworkConfig.ACCEPT_JSON,
                },
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def search(self, query: str, limit: int | None = None) -> list[ProviderResult]:
        """Search for anime by title.

        Args:
            query: Search variation
            limit: Maximum number of candidates (defaults to settings.result_limit)

        Returns:
            Candidates in provider order

        Raises:
            ProviderRateLimitedError: On HTTP 429
            TransientProviderError: On network errors, timeouts, other non-2xx
                statuses or an unparseable body
        """
        params = {
            JikanConfig.QUERY_PARAM: query,
            JikanConfig.LIMIT_PARAM: str(limit or self.settings.result_limit),
        }
        session = self._get_session()

        async with self._limiter:
            start = time.perf_counter()
            try:
                async with session.get(self.settings.search_url, params=params) as response:
                    duration_ms = (time.perf_counter() - start) * MILLIS_PER_SECOND
                    log_api_call(
                        logger,
                        self.settings.search_url,
                        status_code=response.status,
                        duration_ms=duration_ms,
                        context={"query": query},
                    )

                    if response.status == HTTPStatusCodes.TOO_MANY_REQUESTS:
                        raise ProviderRateLimitedError(
                            query,
                            retry_after=_parse_retry_after(response.headers),
                        )
                    if not HTTPStatusCodes.is_success(response.status):
                        raise create_transient_error(
                            f"Search failed with status {response.status}",
                            query,
                            status_code=response.status,
                        )

                    payload = await response.json(content_type=None)
            except asyncio.TimeoutError as e:
                raise create_transient_error(
                    f"Search timed out for: {query}",
                    query,
                    code=ErrorCode.PROVIDER_TIMEOUT,
                    original_error=e,
                ) from e
            except aiohttp.ClientError as e:
                raise create_transient_error(
                    f"Search request failed: {e!s}",
                    query,
                    original_error=e,
                ) from e
            except ValueError as e:
                raise create_transient_error(
                    "Search response was not valid JSON",
                    query,
                    code=ErrorCode.PROVIDER_INVALID_RESPONSE,
                    original_error=e,
                ) from e

        try:
            return SearchResponse.model_validate(payload).data
        except ValidationError as e:
            raise create_transient_error(
                "Search response did not match the expected shape",
                query,
                code=ErrorCode.PROVIDER_INVALID_RESPONSE,
                original_error=e,
            ) from e

    async def fetch_image(self, url: str) -> bytes:
        """Download raw image bytes.

        Raises:
            TransientProviderError: On network errors, timeouts or non-2xx statuses
        """
        session = self._get_session()
        try:
            async with session.get(url) as response:
                if not HTTPStatusCodes.is_success(response.status):
                    raise create_transient_error(
                        f"Image download failed with status {response.status}",
                        url,
                        status_code=response.status,
                    )
                return await response.read()
        except asyncio.TimeoutError as e:
            raise create_transient_error(
                f"Image download timed out: {url}",
                url,
                code=ErrorCode.PROVIDER_TIMEOUT,
                original_error=e,
            ) from e
        except aiohttp.ClientError as e:
            raise create_transient_error(
                f"Image download failed: {e!s}",
                url,
                original_error=e,
            ) from e

    async def verify_image(self, url: str) -> None:
        """Download ``url`` and check that Pillow can decode it.

        Raises:
            TransientProviderError: If the image cannot be fetched or decoded
        """
        data = await self.fetch_image(url)
        try:
            width, height = decode_image(data)
        except (OSError, SyntaxError, ValueError) as e:
            raise create_transient_error(
                f"Image could not be decoded: {url}",
                url,
                code=ErrorCode.IMAGE_DECODE_FAILED,
                original_error=e,
            ) from e
        logger.debug("Verified image %s (%dx%d)", url, width, height)


__all__ = ["JikanClient", "decode_image"]
