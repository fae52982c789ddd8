"""Shared data models."""

from .api import AlternateTitle, ProviderImages, ProviderResult, SearchResponse
from .cache import CacheSnapshot
from .events import PipelineEvent
from .recommendation import RecommendationRecord, ResolvedCard

__all__ = [
    "AlternateTitle",
    "CacheSnapshot",
    "PipelineEvent",
    "ProviderImages",
    "ProviderResult",
    "RecommendationRecord",
    "ResolvedCard",
    "SearchResponse",
]
