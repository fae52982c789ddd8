"""Per-title image resolution.

Resolves one recommended title to a verified poster URL by walking its
search variations in priority order against the media provider, with a
fixed per-variation attempt budget and fixed backoff delays.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from aniposter.config.models.api_settings import JikanSettings
from aniposter.core.cancellation import CancellationToken, check_cancelled
from aniposter.core.matching import select_best
from aniposter.core.normalization import variations_for
from aniposter.services.image_cache import PersistentImageCache
from aniposter.shared.constants import MILLIS_PER_SECOND
from aniposter.shared.errors import (
    ImageNotFoundError,
    ProviderRateLimitedError,
    TransientProviderError,
)
from aniposter.shared.logging import log_operation_error, log_operation_success
from aniposter.shared.protocols import MediaSearchProvider

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ImageResolver:
    """Resolve titles to verified image URLs.

    Retry policy per variation:

    - HTTP 429: wait ``rate_limit_backoff`` and retry; the attempt counts.
    - Transient failure (network, bad body, undecodable image): wait
      ``retry_delay`` and retry, or move on once the budget is spent.
    - Clean response without a usable match: search the same variation
      again without waiting; the attempt counts.

    A title therefore costs at most ``4 * max_attempts_per_variation``
    provider searches before ImageNotFoundError is raised.
    """

    def __init__(
        self,
        provider: MediaSearchProvider,
        cache: PersistentImageCache | None = None,
        settings: JikanSettings | None = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the resolver.

        Args:
            provider: Media search provider
            cache: Image cache consulted before searching and updated on success
            settings: Attempt budget, delays and result limit
            sleep: Awaitable sleep used for backoff (injectable for tests)
        """
        self.provider = provider
        self.cache = cache
        self.settings = settings or JikanSettings()
        self._sleep = sleep

    async def resolve(
        self,
        name: str,
        max_attempts_per_variation: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> str:
        """Resolve ``name`` to a verified image URL.

        Args:
            name: Recommended title
            max_attempts_per_variation: Overrides the configured budget
            cancellation: Token checked after every suspension

        Returns:
            Image URL

        Raises:
            ImageNotFoundError: Every variation exhausted
            OperationCancelledError: The run was cancelled
        """
        if self.cache is not None:
            cached = self.cache.lookup(name)
            if cached:
                logger.debug("Cache hit for '%s'", name)
                return cached

        budget = max_attempts_per_variation or self.settings.max_attempts_per_variation
        start = time.perf_counter()
        attempts = 0

        for variation_index, variation in enumerate(variations_for(name)):
            if not variation.strip():
                logger.debug("Skipping blank variation #%d for '%s'", variation_index, name)
                continue

            for attempt in range(1, budget + 1):
                check_cancelled(cancellation, "resolve_image")
                attempts += 1
                try:
                    url = await self._attempt(variation, cancellation)
                except ProviderRateLimitedError as e:
                    log_operation_error(logger, e, "resolve_image", level=logging.WARNING)
                    await self._sleep(self.settings.rate_limit_backoff)
                    check_cancelled(cancellation, "resolve_image")
                    continue
                except TransientProviderError as e:
                    log_operation_error(
                        logger,
                        e,
                        "resolve_image",
                        {"title": name, "variation": variation, "attempt": attempt},
                        level=logging.WARNING,
                    )
                    if attempt == budget:
                        break
                    await self._sleep(self.settings.retry_delay)
                    check_cancelled(cancellation, "resolve_image")
                    continue

                if url is None:
                    logger.debug("No match for variation '%s' of '%s'", variation, name)
                    continue

                if self.cache is not None:
                    self.cache.merge(name, url)
                log_operation_success(
                    logger,
                    "resolve_image",
                    (time.perf_counter() - start) * MILLIS_PER_SECOND,
                    result_info={
                        "title": name,
                        "variation": variation_index,
                        "attempts": attempts,
                    },
                )
                return url

        raise ImageNotFoundError(name, attempts)

    async def _attempt(
        self,
        variation: str,
        cancellation: CancellationToken | None,
    ) -> str | None:
        """One search + match + verify round. Returns None on a clean no-match."""
        candidates = await self.provider.search(variation, self.settings.result_limit)
        check_cancelled(cancellation, "resolve_image")

        match = select_best(variation, candidates)
        if match is None or not match.image_url:
            return None

        url = match.image_url
        if self.settings.verify_images:
            await self.provider.verify_image(url)
            check_cancelled(cancellation, "resolve_image")
        return url


__all__ = ["ImageResolver"]
