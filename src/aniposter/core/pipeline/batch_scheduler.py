"""Batched image resolution for an ordered list of recommendations.

Records are resolved in fixed-size batches. Within a batch every record is
resolved concurrently and cards are emitted as they land, not in input
order. Batches run strictly one after another, separated by a fixed pacing
delay, and the cache is flushed after each batch.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from aniposter.core.cancellation import CancellationToken, check_cancelled
from aniposter.shared.constants import MILLIS_PER_SECOND, PipelineConfig, PipelineEventKind
from aniposter.shared.errors import AniPosterError, OperationCancelledError
from aniposter.shared.logging import log_operation_error, log_operation_start, log_operation_success
from aniposter.shared.models.events import PipelineEvent
from aniposter.shared.models.recommendation import RecommendationRecord, ResolvedCard

if TYPE_CHECKING:
    from aniposter.services.image_cache import PersistentImageCache
    from aniposter.services.image_resolver import ImageResolver

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
CardCallback = Callable[[ResolvedCard], Any]
BatchCardCallback = Callable[[ResolvedCard, int], Any]


class BatchScheduler:
    """Drive image resolution for a list of records in paced batches.

    Example:
        >>> scheduler = BatchScheduler(resolver, cache)
        >>> async for event in scheduler.stream(records):
        ...     print(event.kind, event.card)
    """

    def __init__(
        self,
        resolver: ImageResolver,
        cache: PersistentImageCache | None = None,
        batch_size: int = PipelineConfig.BATCH_SIZE,
        rate_limit_delay: float = PipelineConfig.RATE_LIMIT_DELAY,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if batch_size < 1:
            msg = f"batch_size must be positive, got {batch_size}"
            raise ValueError(msg)
        self.resolver = resolver
        self.cache = cache
        self.batch_size = batch_size
        self.rate_limit_delay = rate_limit_delay
        self._sleep = sleep

    def partition(self, records: Sequence[RecommendationRecord]) -> list[list[RecommendationRecord]]:
        """Split records into consecutive batches of ``batch_size``."""
        return [
            list(records[i : i + self.batch_size])
            for i in range(0, len(records), self.batch_size)
        ]

    async def resolve_all(
        self,
        records: Sequence[RecommendationRecord],
        on_ready: CardCallback,
        on_first_batch_done: Callable[[], Any],
        cancellation: CancellationToken | None = None,
    ) -> None:
        """Resolve every record, emitting cards through ``on_ready``.

        ``on_first_batch_done`` fires exactly once, after every resolution in
        the first batch has settled and before the second batch launches.
        Failed resolutions are logged and dropped. A cancelled run returns
        quietly without emitting further cards or flushing the cache.

        Args:
            records: Records in display order
            on_ready: Called with each resolved card as it lands
            on_first_batch_done: Called once the first batch settles
            cancellation: Token for cooperative cancellation
        """
        await self._run(
            list(records),
            lambda card, _batch_index: on_ready(card),
            on_first_batch_done,
            cancellation,
        )

    async def stream(
        self,
        records: Sequence[RecommendationRecord],
        cancellation: CancellationToken | None = None,
    ) -> AsyncIterator[PipelineEvent]:
        """Run the pipeline and yield its events as they happen.

        Closing the iterator before it is exhausted cancels the run.
        """
        token = cancellation or CancellationToken("stream")
        queue: asyncio.Queue[PipelineEvent | None] = asyncio.Queue()

        def emit_card(card: ResolvedCard, batch_index: int) -> None:
            queue.put_nowait(
                PipelineEvent(
                    kind=PipelineEventKind.CARD_READY,
                    batch_index=batch_index,
                    card=card,
                )
            )

        def emit_first_batch_done() -> None:
            queue.put_nowait(PipelineEvent(kind=PipelineEventKind.FIRST_BATCH_DONE, batch_index=0))

        task = asyncio.ensure_future(
            self._run(list(records), emit_card, emit_first_batch_done, token)
        )
        task.add_done_callback(lambda _: queue.put_nowait(None))

        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
            await task
        finally:
            if not task.done():
                token.cancel()
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    logger.debug("Stream closed before the run finished")

    async def _run(
        self,
        records: list[RecommendationRecord],
        on_ready: BatchCardCallback,
        on_first_batch_done: Callable[[], Any],
        cancellation: CancellationToken | None,
    ) -> None:
        batches = self.partition(records)
        start = time.perf_counter()
        emitted = 0
        log_operation_start(
            logger,
            "resolve_all",
            {"records": len(records), "batches": len(batches), "batch_size": self.batch_size},
        )

        # Flushing an unloaded cache would overwrite entries still valid on disk
        if self.cache is not None and not self.cache.loaded:
            self.cache.load()

        if not batches:
            on_first_batch_done()
            return

        try:
            for batch_index, batch in enumerate(batches):
                check_cancelled(cancellation, "resolve_all")

                results = await asyncio.gather(
                    *(
                        self._resolve_one(record, batch_index, on_ready, cancellation)
                        for record in batch
                    ),
                    return_exceptions=True,
                )
                for result in results:
                    if isinstance(result, BaseException):
                        raise result
                    emitted += int(result)

                check_cancelled(cancellation, "resolve_all")
                if self.cache is not None and self.cache.working_set:
                    self.cache.flush()

                if batch_index == 0:
                    on_first_batch_done()

                if batch_index < len(batches) - 1:
                    await self._sleep(self.rate_limit_delay)
        except OperationCancelledError:
            logger.info("Run cancelled after %d of %d cards", emitted, len(records))
            return

        log_operation_success(
            logger,
            "resolve_all",
            (time.perf_counter() - start) * MILLIS_PER_SECOND,
            result_info={"records": len(records), "cards": emitted},
        )

    async def _resolve_one(
        self,
        record: RecommendationRecord,
        batch_index: int,
        on_ready: BatchCardCallback,
        cancellation: CancellationToken | None,
    ) -> bool:
        """Resolve one record; True if a card was emitted."""
        try:
            url = await self.resolver.resolve(record.name, cancellation=cancellation)
        except OperationCancelledError:
            raise
        except AniPosterError as e:
            log_operation_error(
                logger,
                e,
                "resolve_all",
                {"title": record.name, "batch_index": batch_index},
                level=logging.WARNING,
            )
            return False
        except Exception:
            logger.exception("Unexpected failure resolving '%s'", record.name)
            return False

        if cancellation is not None and cancellation.cancelled:
            return False

        on_ready(ResolvedCard(record=record, image_url=url), batch_index)
        return True


__all__ = ["BatchScheduler"]
