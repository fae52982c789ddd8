"""Jikan (MyAnimeList) media provider."""

from .jikan_client import JikanClient, decode_image

__all__ = ["JikanClient", "decode_image"]
