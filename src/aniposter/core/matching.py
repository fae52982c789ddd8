"""Candidate selection for provider search results.

The matching policy is plain containment on normalized, lower-cased titles.
Provider order is preserved and the first satisfying candidate wins; there is
no scoring and no string distance.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from aniposter.core.normalization import comparable
from aniposter.shared.models.api.jikan import ProviderResult

logger = logging.getLogger(__name__)


def _matches(query: str, candidate: ProviderResult) -> bool:
    title = comparable(candidate.title)
    if title and (query in title or title in query):
        return True
    return any(query in comparable(alt) for alt in candidate.alternate_titles)


def select_best(variation: str, candidates: Sequence[ProviderResult]) -> ProviderResult | None:
    """Pick the first candidate whose titles contain (or are contained in) the query.

    A candidate matches when its normalized primary title contains the
    normalized query, the normalized query contains its primary title, or
    any normalized alternate title contains the query.

    Args:
        variation: Search variation used for the query.
        candidates: Provider results in provider order.

    Returns:
        The first matching candidate, or None. A query that normalizes to an
        empty string never matches.
    """
    query = comparable(variation)
    if not query:
        logger.debug("Variation '%s' normalizes to an empty query, skipping match", variation)
        return None

    for index, candidate in enumerate(candidates):
        if _matches(query, candidate):
            logger.debug(
                "Variation '%s' matched candidate #%d '%s'",
                variation,
                index,
                candidate.title,
            )
            return candidate

    return None
