"""Tests for recommendation payload parsing and grid materialization."""

import pytest

from aniposter.core.recommendations import materialize_cards, parse_recommendation_payload
from aniposter.shared.errors import ErrorCode, RecommendationPayloadError
from aniposter.shared.models.recommendation import RecommendationRecord, ResolvedCard


class TestParseRecommendationPayload:
    """parse_recommendation_payload() accepted shapes."""

    def test_bare_list(self) -> None:
        records = parse_recommendation_payload(
            [{"name": "Naruto", "genre": "Action, Adventure", "rating": 8.1}, {"name": "Bleach"}]
        )
        assert [r.name for r in records] == ["Naruto", "Bleach"]
        assert records[0].genres == ["Action", "Adventure"]
        assert records[1].rating_label == "N/A"

    def test_recommendations_key(self) -> None:
        records = parse_recommendation_payload({"recommendations": [{"name": "Monster"}]})
        assert [r.name for r in records] == ["Monster"]

    def test_popular_then_relevant(self) -> None:
        payload = {
            "relevant": [{"name": "Mushishi"}],
            "popular": [{"name": "One Piece"}, {"name": "Naruto"}],
        }
        records = parse_recommendation_payload(payload)
        assert [r.name for r in records] == ["One Piece", "Naruto", "Mushishi"]

    def test_extra_fields_are_ignored(self) -> None:
        records = parse_recommendation_payload([{"name": "Haikyuu!!", "score": 0.93, "id": 7}])
        assert records[0].name == "Haikyuu!!"

    def test_message_only_payload_raises_with_message(self) -> None:
        with pytest.raises(RecommendationPayloadError) as exc_info:
            parse_recommendation_payload({"message": "No anime matched your filters"})
        assert exc_info.value.code == ErrorCode.NO_RECOMMENDATIONS
        assert exc_info.value.message == "No anime matched your filters"

    def test_items_without_name_are_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        records = parse_recommendation_payload(
            [{"genre": "Drama"}, {"name": "   "}, {"name": "Clannad"}, "not-an-object"]
        )
        assert [r.name for r in records] == ["Clannad"]
        assert "Skipping recommendation" in caplog.text

    def test_empty_payload_raises(self) -> None:
        with pytest.raises(RecommendationPayloadError, match="No recommendations found"):
            parse_recommendation_payload([])

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(RecommendationPayloadError) as exc_info:
            parse_recommendation_payload("Naruto")
        assert exc_info.value.code == ErrorCode.INVALID_PAYLOAD


class TestMaterializeCards:
    """materialize_cards() final ordering."""

    def test_input_order_with_placeholders(self, records: list[RecommendationRecord]) -> None:
        # Given: cards landed out of order and One Piece never resolved
        by_name = {r.name: r for r in records}
        cards = [
            ResolvedCard(record=by_name["Death Note"], image_url="https://img/dn.jpg"),
            ResolvedCard(record=by_name["Naruto"], image_url="https://img/naruto.jpg"),
            ResolvedCard(record=by_name["Bleach"], image_url="https://img/bleach.jpg"),
        ]

        # When
        grid = materialize_cards(records, cards)

        # Then
        assert [c.image_url if c else None for c in grid] == [
            "https://img/naruto.jpg",
            "https://img/bleach.jpg",
            None,
            "https://img/dn.jpg",
        ]

    def test_no_cards(self, records: list[RecommendationRecord]) -> None:
        assert materialize_cards(records, []) == [None] * len(records)

    def test_duplicate_names_share_a_card(self) -> None:
        first = RecommendationRecord(name="Hellsing", rating=7.5)
        second = RecommendationRecord(name="Hellsing", rating=8.4)
        card = ResolvedCard(record=first, image_url="https://img/h.jpg")

        grid = materialize_cards([first, second], [card])

        assert grid == [card, card]
