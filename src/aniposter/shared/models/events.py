"""Pipeline stream events."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from aniposter.shared.models.recommendation import ResolvedCard


class PipelineEvent(BaseModel):
    """One item of the pipeline's async event stream.

    ``card_ready`` events carry the card; ``first_batch_done`` is emitted
    exactly once per run after the first batch settles.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["card_ready", "first_batch_done"]
    batch_index: int
    card: ResolvedCard | None = None
