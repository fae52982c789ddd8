"""Persisted title -> image URL cache.

The whole map is stored as one JSON snapshot stamped with a single
timestamp. Snapshots older than the expiry window are discarded (and the
file removed) when loaded. Every storage failure is logged and treated as
a cache miss, so the cache never fails a resolution.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Callable

import orjson
from pydantic import ValidationError

from aniposter.shared.constants import MILLIS_PER_SECOND, Cache
from aniposter.shared.errors import CacheIOError, ErrorCode, create_cache_error
from aniposter.shared.logging import log_operation_error, log_operation_success
from aniposter.shared.models.cache import CacheSnapshot

logger = logging.getLogger(__name__)


def _epoch_ms() -> int:
    return int(time.time() * MILLIS_PER_SECOND)


class PersistentImageCache:
    """Durable title -> image URL map with whole-snapshot expiry.

    ``load`` reads the stored snapshot once at pipeline start and seeds the
    in-memory working set with it. ``loaded`` tells whether that has
    happened yet. ``merge`` only touches the working set;
    ``flush`` persists the full working set with a fresh timestamp.

    Attributes:
        path: Snapshot file location
        expiry_ms: Snapshot lifetime in milliseconds
        enabled: When False nothing is read from or written to disk
        loaded: True once ``load`` has run
    """

    def __init__(
        self,
        path: str | Path | None = None,
        expiry_ms: int = Cache.EXPIRY_MS,
        *,
        enabled: bool = True,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            path: Snapshot file; defaults to ~/.aniposter/image_cache.json
            expiry_ms: Snapshot lifetime in milliseconds
            enabled: Disable to run without durable storage
            clock: Returns the current epoch time in milliseconds
        """
        default_path = Path(Cache.DEFAULT_DIR) / Cache.DEFAULT_FILENAME
        self.path = Path(path or default_path).expanduser()
        self.expiry_ms = expiry_ms
        self.enabled = enabled
        self._clock = clock or _epoch_ms
        self._snapshot: CacheSnapshot | None = None
        self._working_set: dict[str, str] = {}
        self.loaded = False
        self.hits = 0
        self.misses = 0

    @property
    def snapshot(self) -> CacheSnapshot | None:
        """Stored snapshot as of the last load or flush."""
        return self._snapshot

    @property
    def working_set(self) -> dict[str, str]:
        return dict(self._working_set)

    def load(self) -> CacheSnapshot | None:
        """Read the stored snapshot.

        Returns:
            The snapshot, or None if it is absent, malformed or expired.
            An expired snapshot file is deleted.
        """
        self.loaded = True
        self._snapshot = None
        self._working_set = {}
        if not self.enabled or not self.path.exists():
            return None

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            self._report(
                create_cache_error(
                    f"Failed to read image cache: {e!s}",
                    ErrorCode.CACHE_READ_FAILED,
                    self.path,
                    original_error=e,
                ),
                "cache_load",
            )
            return None

        try:
            snapshot = CacheSnapshot.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            self._report(
                create_cache_error(
                    "Image cache snapshot is malformed, ignoring it",
                    ErrorCode.CACHE_CORRUPTED,
                    self.path,
                    original_error=e,
                ),
                "cache_load",
            )
            return None

        now = self._clock()
        if snapshot.is_expired(now, self.expiry_ms):
            logger.info(
                "Image cache expired (age %d ms), discarding %d entries",
                snapshot.age_ms(now),
                len(snapshot.images),
            )
            self._delete_file()
            return None

        self._snapshot = snapshot
        self._working_set = dict(snapshot.images)
        logger.debug("Loaded %d cached images from %s", len(snapshot.images), self.path)
        return snapshot

    def lookup(self, name: str) -> str | None:
        """Return the cached URL for ``name`` if the stored snapshot is still valid."""
        snapshot = self._snapshot
        if snapshot is None or snapshot.is_expired(self._clock(), self.expiry_ms):
            self.misses += 1
            return None

        url = snapshot.images.get(name)
        if url is None:
            self.misses += 1
        else:
            self.hits += 1
        return url

    def merge(self, name: str, url: str) -> None:
        """Add or overwrite an entry in the in-memory working set."""
        self._working_set[name] = url

    def flush(self) -> bool:
        """Persist the working set with a new timestamp.

        Returns:
            True if a snapshot was written
        """
        if not self.enabled or not self._working_set:
            return False

        start = time.perf_counter()
        snapshot = CacheSnapshot(images=dict(self._working_set), timestamp=self._clock())
        try:
            self._write(snapshot)
        except OSError as e:
            self._report(
                create_cache_error(
                    f"Failed to write image cache: {e!s}",
                    ErrorCode.CACHE_WRITE_FAILED,
                    self.path,
                    original_error=e,
                ),
                "cache_flush",
            )
            return False

        self._snapshot = snapshot
        log_operation_success(
            logger=logger,
            operation="cache_flush",
            duration_ms=(time.perf_counter() - start) * MILLIS_PER_SECOND,
            result_info={"entries": len(snapshot.images)},
        )
        return True

    def clear(self) -> bool:
        """Drop all entries and remove the snapshot file.

        Returns:
            True if a file was removed
        """
        self._snapshot = None
        self._working_set = {}
        return self._delete_file()

    def stats(self) -> dict[str, Any]:
        """Summarize the stored snapshot for display."""
        snapshot = self._snapshot
        now = self._clock()
        return {
            "path": str(self.path),
            "enabled": self.enabled,
            "entries": len(snapshot.images) if snapshot else 0,
            "age_ms": snapshot.age_ms(now) if snapshot else None,
            "expires_in_ms": (self.expiry_ms - snapshot.age_ms(now)) if snapshot else None,
            "hits": self.hits,
            "misses": self.misses,
        }

    def _write(self, snapshot: CacheSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_bytes(orjson.dumps(snapshot.model_dump()))
        os.replace(tmp_path, self.path)

    def _delete_file(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            self._report(
                create_cache_error(
                    f"Failed to remove image cache: {e!s}",
                    ErrorCode.CACHE_WRITE_FAILED,
                    self.path,
                    original_error=e,
                ),
                "cache_delete",
            )
            return False
        return True

    @staticmethod
    def _report(error: CacheIOError, operation: str) -> None:
        log_operation_error(
            logger=logger,
            error=error,
            operation=operation,
            level=logging.WARNING,
        )


__all__ = ["PersistentImageCache"]
