"""Cache configuration model.

This module contains the configuration for the persisted title -> image URL
cache snapshot.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from aniposter.shared.constants import BASE_HOUR, MILLIS_PER_SECOND, Cache


class CacheSettings(BaseModel):
    """Image cache configuration."""

    enabled: bool = Field(default=True, description="Enable the persisted image cache")
    path: Path = Field(
        default=Path(Cache.DEFAULT_DIR) / Cache.DEFAULT_FILENAME,
        description="Cache snapshot file",
    )
    expiry_hours: float = Field(
        default=Cache.EXPIRY_HOURS,
        gt=0,
        description="Snapshot lifetime in hours",
    )

    @property
    def resolved_path(self) -> Path:
        return self.path.expanduser()

    @property
    def expiry_ms(self) -> int:
        return int(self.expiry_hours * BASE_HOUR * MILLIS_PER_SECOND)


__all__ = ["CacheSettings"]
