"""
Pytest configuration and shared fixtures for AniPoster tests.

Provides a scriptable media provider stub, recommendation records, an
isolated image cache and a recording sleep so that backoff and pacing
delays never actually wait.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Callable

import pytest

from aniposter.config import reset_config
from aniposter.services.image_cache import PersistentImageCache
from aniposter.shared.errors import ProviderRateLimitedError, create_transient_error
from aniposter.shared.models.api.jikan import ProviderResult
from aniposter.shared.models.recommendation import RecommendationRecord


def make_result(title: str, image_url: str | None = None, alternates: list[str] | None = None) -> ProviderResult:
    """Build a provider search result in Jikan's shape."""
    payload: dict[str, Any] = {
        "mal_id": abs(hash(title)) % 100000,
        "title": title,
        "titles": [{"type": "Synonym", "title": alt} for alt in alternates or []],
    }
    if image_url is not None:
        payload["images"] = {"jpg": {"image_url": image_url}}
    return ProviderResult.model_validate(payload)


class StubProvider:
    """Scriptable MediaSearchProvider.

    ``responses`` maps a query to either a list of results, an exception
    instance, or a callable receiving the call number for that query.
    Unknown queries return an empty list.
    """

    def __init__(self, responses: dict[str, Any] | None = None, default: Any = None) -> None:
        self.responses = responses or {}
        self.default = default
        self.search_calls: list[str] = []
        self.verify_calls: list[str] = []
        self.broken_images: set[str] = set()

    async def search(self, query: str, limit: int) -> list[ProviderResult]:
        self.search_calls.append(query)
        response = self.responses.get(query, self.default)
        if callable(response) and not isinstance(response, type):
            response = response(self.search_calls.count(query))
        if isinstance(response, BaseException):
            raise response
        return list(response or [])

    async def verify_image(self, url: str) -> None:
        self.verify_calls.append(url)
        if url in self.broken_images:
            raise create_transient_error("Image could not be decoded", url)


def rate_limited(query: str) -> ProviderRateLimitedError:
    return ProviderRateLimitedError(query)


class SleepRecorder:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self, on_sleep: Callable[[float], None] | None = None) -> None:
        self.delays: list[float] = []
        self._on_sleep = on_sleep

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self._on_sleep is not None:
            self._on_sleep(delay)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def cache_path(temp_dir: Path) -> Path:
    return temp_dir / "image_cache.json"


@pytest.fixture
def clock() -> list[int]:
    """Mutable epoch-ms clock: tests advance it with ``clock[0] += ms``."""
    return [1_700_000_000_000]


@pytest.fixture
def image_cache(cache_path: Path, clock: list[int]) -> PersistentImageCache:
    return PersistentImageCache(cache_path, clock=lambda: clock[0])


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def records() -> list[RecommendationRecord]:
    return [
        RecommendationRecord(name="Naruto", genre="Action, Adventure", rating=8.1),
        RecommendationRecord(name="Bleach", genre="Action", rating=7.9),
        RecommendationRecord(name="One Piece", genre="Adventure, Comedy", rating=8.7),
        RecommendationRecord(name="Death Note", genre="Mystery, Thriller", rating=8.6),
    ]


@pytest.fixture(autouse=True)
def _reset_config() -> Generator[None, None, None]:
    reset_config()
    yield
    reset_config()


@pytest.fixture
def result_factory() -> Callable[..., ProviderResult]:
    return make_result


@pytest.fixture
def provider_factory() -> type[StubProvider]:
    return StubProvider


@pytest.fixture
def rate_limit_factory() -> Callable[[str], ProviderRateLimitedError]:
    return rate_limited


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Generator[None, None, None]:
    """Undo CLI logger setup so caplog keeps seeing package records."""
    yield
    package_logger = logging.getLogger("aniposter")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def sleep_recorder_factory() -> type[SleepRecorder]:
    return SleepRecorder
