"""Recommendation and card models.

RecommendationRecord is produced by the external scoring service and is
immutable; ResolvedCard pairs one record with its verified display image.
"""

from __future__ import annotations

from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aniposter.shared.constants import SearchLinks


class RecommendationRecord(BaseModel):
    """One recommended title. Identified by ``name`` within a response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Recommended title")
    genre: str | None = Field(default=None, description="Comma-joined genre tags")
    rating: float | None = Field(default=None, description="Score from the recommender")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "name must not be blank"
            raise ValueError(msg)
        return value

    @property
    def genres(self) -> list[str]:
        """Genre tags split from the comma-joined ``genre`` field."""
        if not self.genre:
            return []
        return [g.strip() for g in self.genre.split(",") if g.strip()]

    @property
    def rating_label(self) -> str:
        """Rating formatted for display."""
        if self.rating is None:
            return "N/A"
        return f"{self.rating:.2f}"


class ResolvedCard(BaseModel):
    """A recommendation record paired with its display image URL."""

    model_config = ConfigDict(frozen=True)

    record: RecommendationRecord
    image_url: str

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def search_url(self) -> str:
        """Web search link for the title, used as the card's click-through."""
        query = urlencode({"q": f"{self.record.name}{SearchLinks.QUERY_SUFFIX}"})
        return f"{SearchLinks.SEARCH_URL}?{query}"
