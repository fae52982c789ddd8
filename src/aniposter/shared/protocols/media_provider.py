"""Media provider protocol for dependency inversion.

Core and service modules resolve images against this interface, so the
concrete HTTP client can be swapped for a stub in tests.
"""

from __future__ import annotations

from typing import Protocol

from aniposter.shared.models.api.jikan import ProviderResult


class MediaSearchProvider(Protocol):
    """Protocol for a fuzzy-searchable media catalog.

    Example:
        >>> from aniposter.services.jikan import JikanClient
        >>>
        >>> provider: MediaSearchProvider = JikanClient()
        >>> results = await provider.search("Naruto", limit=5)
    """

    async def search(self, query: str, limit: int) -> list[ProviderResult]:
        """Search the catalog.

        Args:
            query: Search variation
            limit: Maximum number of candidates

        Returns:
            Candidates in provider order

        Raises:
            ProviderRateLimitedError: On HTTP 429
            TransientProviderError: On any other failure
        """

    async def verify_image(self, url: str) -> None:
        """Fetch and decode an image to prove it is loadable.

        Args:
            url: Image URL

        Raises:
            TransientProviderError: If the image cannot be fetched or decoded
        """
