"""
Pipeline Constants

Batching and pacing constants for the image resolution pipeline.
"""

from .system import BASE_MILLISECOND


class PipelineConfig:
    """Batch scheduler constants."""

    # Number of titles resolved concurrently per batch
    BATCH_SIZE = 3

    # Pause between batches, independent of batch duration
    RATE_LIMIT_DELAY = 250 * BASE_MILLISECOND


class PipelineEventKind:
    """Event kinds emitted by the pipeline stream."""

    CARD_READY = "card_ready"
    FIRST_BATCH_DONE = "first_batch_done"
