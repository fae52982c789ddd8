"""Caller-side glue for the image pipeline.

CardService wires a media provider, the persisted cache, the resolver and
the batch scheduler from settings. Each ``submit`` starts a new run and
supersedes the previous one: the old run is cancelled and any callbacks it
still produces are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any, Callable

from aniposter.config.loader import get_config
from aniposter.config.models.settings import Settings
from aniposter.core.cancellation import CancellationToken
from aniposter.core.pipeline import BatchScheduler
from aniposter.core.recommendations import materialize_cards
from aniposter.services.image_cache import PersistentImageCache
from aniposter.services.image_resolver import ImageResolver
from aniposter.services.jikan import JikanClient
from aniposter.shared.models.events import PipelineEvent
from aniposter.shared.models.recommendation import RecommendationRecord, ResolvedCard
from aniposter.shared.protocols import MediaSearchProvider

logger = logging.getLogger(__name__)


class CardService:
    """Resolve recommendation records into display cards.

    Attributes:
        cache: Persisted image cache shared by every run
        resolver: Per-title image resolver
        scheduler: Batch scheduler
        cards: Cards accumulated by the current run, in arrival order
    """

    def __init__(
        self,
        settings: Settings | None = None,
        provider: MediaSearchProvider | None = None,
        cache: PersistentImageCache | None = None,
        scheduler: BatchScheduler | None = None,
    ) -> None:
        self.settings = settings or get_config()
        self._owns_provider = provider is None
        self.provider = provider or JikanClient(self.settings.api.jikan)
        self.cache = cache or PersistentImageCache(
            self.settings.cache.resolved_path,
            self.settings.cache.expiry_ms,
            enabled=self.settings.cache.enabled,
        )
        self.resolver = ImageResolver(self.provider, self.cache, self.settings.api.jikan)
        self.scheduler = scheduler or BatchScheduler(
            self.resolver,
            self.cache,
            batch_size=self.settings.pipeline.batch_size,
            rate_limit_delay=self.settings.pipeline.rate_limit_delay,
        )
        self.cards: list[ResolvedCard] = []
        self._generation = 0
        self._token: CancellationToken | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def cancel_current(self) -> None:
        """Cancel the in-flight run, if any."""
        if self._token is not None:
            self._token.cancel()

    def _begin_run(self) -> tuple[int, CancellationToken]:
        self.cancel_current()
        self._generation += 1
        token = CancellationToken(f"run-{self._generation}")
        self._token = token
        self.cards = []
        self.cache.load()
        return self._generation, token

    async def submit(
        self,
        records: Sequence[RecommendationRecord],
        on_ready: Callable[[ResolvedCard], Any] | None = None,
        on_first_batch_done: Callable[[], Any] | None = None,
    ) -> list[ResolvedCard | None]:
        """Start a run for ``records`` and wait for it to settle.

        Args:
            records: Records in display order
            on_ready: Called with each card of this run as it lands
            on_first_batch_done: Called once the first batch settles

        Returns:
            Final grid in input order, None where no image was found
        """
        generation, token = self._begin_run()

        def handle_ready(card: ResolvedCard) -> None:
            if generation != self._generation:
                logger.debug("Dropping card '%s' from superseded run %d", card.name, generation)
                return
            self.cards.append(card)
            if on_ready is not None:
                on_ready(card)

        def handle_first_batch_done() -> None:
            if generation == self._generation and on_first_batch_done is not None:
                on_first_batch_done()

        await self.scheduler.resolve_all(records, handle_ready, handle_first_batch_done, token)
        if generation == self._generation:
            return materialize_cards(records, self.cards)
        return materialize_cards(records, [])

    async def stream(self, records: Sequence[RecommendationRecord]) -> AsyncIterator[PipelineEvent]:
        """Start a run and yield its events; supersedes any previous run."""
        generation, token = self._begin_run()
        async for event in self.scheduler.stream(records, token):
            if generation != self._generation:
                break
            if event.card is not None:
                self.cards.append(event.card)
            yield event

    def grid(self, records: Sequence[RecommendationRecord]) -> list[ResolvedCard | None]:
        """Final grid for ``records`` built from the current run's cards."""
        return materialize_cards(records, self.cards)

    async def aclose(self) -> None:
        """Cancel the current run and close the provider if this service created it."""
        self.cancel_current()
        if self._owns_provider and isinstance(self.provider, JikanClient):
            await self.provider.close()

    async def __aenter__(self) -> CardService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["CardService"]
