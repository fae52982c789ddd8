"""Recommendation payload handling.

The recommendation service is an opaque collaborator; its JSON response has
come in several shapes over time. This module turns any of them into an
ordered list of RecommendationRecord and rebuilds the final card grid in
input order once the pipeline has settled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import ValidationError

from aniposter.shared.errors import ErrorCode, ErrorContext, RecommendationPayloadError
from aniposter.shared.models.recommendation import RecommendationRecord, ResolvedCard

logger = logging.getLogger(__name__)

_LIST_KEYS = ("recommendations", "popular", "relevant")


def _extract_items(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload

    if not isinstance(payload, dict):
        raise RecommendationPayloadError(
            code=ErrorCode.INVALID_PAYLOAD,
            message=f"Unsupported payload type: {type(payload).__name__}",
            context=ErrorContext(operation="parse_recommendations"),
        )

    items: list[Any] = []
    for key in _LIST_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            items.extend(value)

    if not items and isinstance(payload.get("message"), str):
        raise RecommendationPayloadError(
            code=ErrorCode.NO_RECOMMENDATIONS,
            message=payload["message"],
            context=ErrorContext(operation="parse_recommendations"),
        )

    return items


def parse_recommendation_payload(payload: Any) -> list[RecommendationRecord]:
    """Convert a recommendation service response into ordered records.

    Accepted shapes:
        - ``[{...}, ...]``
        - ``{"recommendations": [...]}``
        - ``{"popular": [...], "relevant": [...]}`` (popular first)
        - ``{"message": "..."}`` when the service found nothing

    Args:
        payload: Decoded JSON response.

    Returns:
        Records in payload order. Items without a usable ``name`` are skipped.

    Raises:
        RecommendationPayloadError: If the payload has no usable records.
    """
    records: list[RecommendationRecord] = []
    for index, item in enumerate(_extract_items(payload)):
        try:
            records.append(RecommendationRecord.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "Skipping recommendation #%d: %s",
                index,
                e.errors()[0]["msg"] if e.errors() else e,
            )

    if not records:
        raise RecommendationPayloadError(
            code=ErrorCode.NO_RECOMMENDATIONS,
            message="No recommendations found",
            context=ErrorContext(operation="parse_recommendations"),
        )

    logger.debug("Parsed %d recommendation records", len(records))
    return records


def materialize_cards(
    records: Sequence[RecommendationRecord],
    cards: Iterable[ResolvedCard],
) -> list[ResolvedCard | None]:
    """Rebuild the card grid in input order.

    Emission order within a batch is unspecified, so the final grid is
    derived from the original record list. Cards are matched by name; a
    record with no card gets ``None`` (a permanent placeholder). Records
    sharing a name all receive the same card.

    Args:
        records: Original ordered records.
        cards: Cards accumulated from the pipeline, in any order.

    Returns:
        One slot per record.
    """
    by_name: dict[str, ResolvedCard] = {}
    for card in cards:
        by_name[card.name] = card
    return [by_name.get(record.name) for record in records]
