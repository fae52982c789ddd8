"""Core domain logic: title normalization, matching, payloads, cancellation."""

from .cancellation import CancellationToken, check_cancelled
from .matching import select_best
from .normalization import comparable, normalize, variations_for
from .recommendations import materialize_cards, parse_recommendation_payload

__all__ = [
    "CancellationToken",
    "check_cancelled",
    "comparable",
    "materialize_cards",
    "normalize",
    "parse_recommendation_payload",
    "select_best",
    "variations_for",
]
