"""Persisted image cache snapshot model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CacheSnapshot(BaseModel):
    """On-disk cache record: ``{images: {name: url}, timestamp: epoch_ms}``.

    One timestamp covers the whole map. Re-stamping on every flush extends
    the life of every entry already in the map.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "images": {"Naruto": "https://cdn.myanimelist.net/images/anime/13/17405.jpg"},
                "timestamp": 1700000000000,
            },
        },
    )

    images: dict[str, str] = Field(default_factory=dict, description="Title -> image URL")
    timestamp: int = Field(..., ge=0, description="Epoch milliseconds of the last flush")

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp

    def is_expired(self, now_ms: int, expiry_ms: int) -> bool:
        """True once ``now - timestamp >= expiry``."""
        return self.age_ms(now_ms) >= expiry_ms
