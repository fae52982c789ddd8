"""External API models."""

from .jikan import AlternateTitle, ImageVariant, ProviderImages, ProviderResult, SearchResponse

__all__ = [
    "AlternateTitle",
    "ImageVariant",
    "ProviderImages",
    "ProviderResult",
    "SearchResponse",
]
