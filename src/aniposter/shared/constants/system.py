"""Base system constants."""

# Base time units
BASE_MILLISECOND = 0.001
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE

MILLIS_PER_SECOND = 1000
