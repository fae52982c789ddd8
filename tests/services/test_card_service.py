"""Tests for CardService run management."""

import asyncio

import pytest

from aniposter.config.models.cache_settings import CacheSettings
from aniposter.config.models.settings import Settings
from aniposter.services.card_service import CardService
from aniposter.services.jikan import JikanClient
from aniposter.shared.models.recommendation import RecommendationRecord

NARUTO_URL = "https://cdn.myanimelist.net/images/anime/13/17405.jpg"
BLEACH_URL = "https://cdn.myanimelist.net/images/anime/3/40451.jpg"


@pytest.fixture
def settings(cache_path) -> Settings:
    return Settings(cache=CacheSettings(path=cache_path))


@pytest.fixture
def provider(provider_factory, result_factory):
    return provider_factory(
        {
            "Naruto": [result_factory("Naruto", NARUTO_URL)],
            "Bleach": [result_factory("Bleach", BLEACH_URL)],
        }
    )


class TestSubmit:
    """CardService.submit()"""

    @pytest.mark.asyncio
    async def test_submit_returns_ordered_grid(self, settings, provider) -> None:
        records = [
            RecommendationRecord(name="Naruto"),
            RecommendationRecord(name="Unknown Title"),
            RecommendationRecord(name="Bleach"),
        ]
        service = CardService(settings, provider=provider)
        ready: list[str] = []
        signals: list[int] = []

        grid = await service.submit(records, ready.append, lambda: signals.append(1))

        assert [card.image_url if card else None for card in grid] == [NARUTO_URL, None, BLEACH_URL]
        assert sorted(card.name for card in ready) == ["Bleach", "Naruto"]
        assert signals == [1]
        assert service.generation == 1

    @pytest.mark.asyncio
    async def test_results_are_persisted_between_runs(self, settings, provider, provider_factory) -> None:
        records = [RecommendationRecord(name="Naruto")]
        await CardService(settings, provider=provider).submit(records)

        offline = provider_factory()
        grid = await CardService(settings, provider=offline).submit(records)

        assert grid[0] is not None
        assert grid[0].image_url == NARUTO_URL
        assert offline.search_calls == []

    @pytest.mark.asyncio
    async def test_new_submit_supersedes_previous_run(self, settings, provider_factory, result_factory) -> None:
        # Given: the first run blocks inside its provider call
        gate = asyncio.Event()

        class GatedProvider(provider_factory):
            async def search(self, query: str, limit: int):
                if query == "Naruto":
                    await gate.wait()
                return await super().search(query, limit)

        provider = GatedProvider(
            {
                "Naruto": [result_factory("Naruto", NARUTO_URL)],
                "Bleach": [result_factory("Bleach", BLEACH_URL)],
            }
        )
        service = CardService(settings, provider=provider)
        stale: list[str] = []
        first = asyncio.ensure_future(
            service.submit([RecommendationRecord(name="Naruto")], lambda card: stale.append(card.name))
        )
        await asyncio.sleep(0)

        # When
        second = await service.submit([RecommendationRecord(name="Bleach")])
        gate.set()
        first_grid = await first

        # Then
        assert stale == []
        assert first_grid == [None]
        assert second[0] is not None
        assert [card.name for card in service.cards] == ["Bleach"]
        assert service.generation == 2


class TestStream:
    @pytest.mark.asyncio
    async def test_stream_collects_cards(self, settings, provider) -> None:
        records = [RecommendationRecord(name="Naruto"), RecommendationRecord(name="Bleach")]
        service = CardService(settings, provider=provider)

        kinds = [event.kind async for event in service.stream(records)]

        assert kinds.count("card_ready") == 2
        assert kinds[-1] == "first_batch_done"
        assert all(card is not None for card in service.grid(records))


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_default_provider_is_jikan_and_closed(self, settings, mocker) -> None:
        service = CardService(settings)
        assert isinstance(service.provider, JikanClient)
        close = mocker.patch.object(service.provider, "close", new=mocker.AsyncMock())

        async with service:
            pass

        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_injected_provider_is_not_closed(self, settings, provider) -> None:
        service = CardService(settings, provider=provider)
        await service.aclose()

    def test_settings_drive_components(self, cache_path, provider) -> None:
        settings = Settings(cache=CacheSettings(path=cache_path, enabled=False))
        settings.pipeline.batch_size = 5

        service = CardService(settings, provider=provider)

        assert service.scheduler.batch_size == 5
        assert service.cache.enabled is False
        assert service.cache.path == cache_path
