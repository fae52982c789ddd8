"""Service layer: media provider client, image cache, resolver and card service."""

from .card_service import CardService
from .image_cache import PersistentImageCache
from .image_resolver import ImageResolver
from .jikan import JikanClient

__all__ = [
    "CardService",
    "ImageResolver",
    "JikanClient",
    "PersistentImageCache",
]
