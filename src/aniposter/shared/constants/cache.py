"""
Cache Constants

Constants for the persisted title -> image URL cache snapshot.
"""

from .system import BASE_HOUR, MILLIS_PER_SECOND


class Cache:
    """Image cache constants."""

    # Whole-snapshot expiry
    EXPIRY_HOURS = 24
    EXPIRY_MS = EXPIRY_HOURS * BASE_HOUR * MILLIS_PER_SECOND

    # Default snapshot location
    DEFAULT_DIR = "~/.aniposter"
    DEFAULT_FILENAME = "image_cache.json"

    # Snapshot fields
    IMAGES_FIELD = "images"
    TIMESTAMP_FIELD = "timestamp"
