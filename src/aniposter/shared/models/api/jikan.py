"""Jikan API Response Models.

This module defines pydantic models for Jikan search responses to ensure
type safety and validation at the external API boundary. Only the fields
the image pipeline reads are modelled; everything else is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty(value: object) -> object:
    return "" if value is None else value


class AlternateTitle(BaseModel):
    """One entry of a result's ``titles`` list (synonym, English, Japanese...)."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    title: str = ""

    _title_not_null = field_validator("title", mode="before")(_none_to_empty)


class ImageVariant(BaseModel):
    """Image URLs for one encoding (jpg or webp)."""

    model_config = ConfigDict(extra="ignore")

    image_url: str | None = None
    small_image_url: str | None = None
    large_image_url: str | None = None


class ProviderImages(BaseModel):
    """Image block of a search result."""

    model_config = ConfigDict(extra="ignore")

    jpg: ImageVariant | None = None
    webp: ImageVariant | None = None


class ProviderResult(BaseModel):
    """Single search result from the media provider."""

    model_config = ConfigDict(extra="ignore")

    mal_id: int | None = None
    title: str = ""
    titles: list[AlternateTitle] = Field(default_factory=list)
    images: ProviderImages | None = None

    _title_not_null = field_validator("title", mode="before")(_none_to_empty)

    @property
    def image_url(self) -> str | None:
        """Primary display image (``images.jpg.image_url``), if any."""
        if self.images is None or self.images.jpg is None:
            return None
        return self.images.jpg.image_url or None

    @property
    def alternate_titles(self) -> list[str]:
        """Alternate title strings, empty entries dropped."""
        return [t.title for t in self.titles if t.title]


class SearchResponse(BaseModel):
    """Complete provider search response: ``{data: [...]}``."""

    model_config = ConfigDict(extra="ignore")

    data: list[ProviderResult] = Field(default_factory=list)
