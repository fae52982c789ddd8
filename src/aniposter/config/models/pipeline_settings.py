"""Pipeline configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from aniposter.shared.constants import PipelineConfig


class PipelineSettings(BaseModel):
    """Batch scheduler configuration."""

    batch_size: int = Field(
        default=PipelineConfig.BATCH_SIZE,
        gt=0,
        description="Titles resolved concurrently per batch",
    )
    rate_limit_delay: float = Field(
        default=PipelineConfig.RATE_LIMIT_DELAY,
        ge=0,
        description="Pause between batches in seconds",
    )


__all__ = ["PipelineSettings"]
