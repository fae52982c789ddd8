"""Cooperative cancellation for pipeline runs.

A run has no preemptive abort. Instead the scheduler and the resolver check
a shared token before each batch launch and after every suspension point
(network call, backoff sleep, pacing sleep), and stop at the next check.
"""

from __future__ import annotations

import logging

from aniposter.shared.errors import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cancellation handle shared by one pipeline run."""

    def __init__(self, label: str = "run") -> None:
        self.label = label
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        if not self._cancelled:
            logger.debug("Cancellation requested for %s", self.label)
        self._cancelled = True

    def raise_if_cancelled(self, operation: str = "resolve_all") -> None:
        """Raise OperationCancelledError if cancellation was requested."""
        if self._cancelled:
            raise OperationCancelledError(operation)

    def __repr__(self) -> str:
        return f"CancellationToken(label={self.label!r}, cancelled={self._cancelled})"


def check_cancelled(token: CancellationToken | None, operation: str) -> None:
    """Raise if ``token`` is set and cancelled; no-op for ``None``."""
    if token is not None:
        token.raise_if_cancelled(operation)
