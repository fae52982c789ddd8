"""Batched resolution pipeline."""

from .batch_scheduler import BatchScheduler

__all__ = ["BatchScheduler"]
