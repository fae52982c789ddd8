"""Title normalization module for AniPoster.

This module turns a raw recommended title into a canonical search form and
into the ordered list of search variations the image resolver tries against
the media provider.

The normalization process:
1. Replace separator/punctuation characters with a space
2. Collapse whitespace runs
3. Strip trailing release-format tokens (TV, Movie, OVA, Special)
4. Strip trailing "Season N" / "Part N" fragments
5. Trim

Steps 3 and 4 repeat until nothing more can be stripped, so the function is
idempotent: ``normalize(normalize(x)) == normalize(x)``.
"""

from __future__ import annotations

import re

# Compile patterns once at module level
_SEPARATOR_PATTERN = re.compile(r"[:\-～!@#$%^&*()_+=]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_FORMAT_SUFFIX_PATTERN = re.compile(r"(?:^|\s)(?:TV|Movie|OVA|Special)$", re.IGNORECASE)
_SEQUEL_SUFFIX_PATTERN = re.compile(r"(?:^|\s)(?:Season|Part)\s+\d+$", re.IGNORECASE)

VARIATION_COUNT = 4


def normalize(name: str) -> str:
    """Normalize a title into its canonical search form.

    Args:
        name: Raw title as returned by the recommendation service.

    Returns:
        Normalized title. May be empty when the title consists only of
        separators or format tokens.

    Examples:
        >>> normalize("Attack on Titan: Season 2")
        'Attack on Titan'
        >>> normalize("Kaguya-sama wa Kokurasetai TV")
        'Kaguya sama wa Kokurasetai'
    """
    text = _SEPARATOR_PATTERN.sub(" ", name)
    text = _WHITESPACE_PATTERN.sub(" ", text).strip()

    while True:
        stripped = _FORMAT_SUFFIX_PATTERN.sub("", text)
        stripped = _SEQUEL_SUFFIX_PATTERN.sub("", stripped).strip()
        if stripped == text:
            return text
        text = stripped


def variations_for(name: str) -> list[str]:
    """Build the ordered search variations for a title.

    Order is priority order: the original name, the normalized name, the
    part before the first colon, and the first word of the normalized name.
    Duplicates are kept; consumers stop at the first success.

    Args:
        name: Raw title.

    Returns:
        List of exactly four strings, the first being ``name`` unchanged.
    """
    normalized = normalize(name)
    return [
        name,
        normalized,
        name.split(":")[0],
        normalized.split(" ")[0],
    ]


def comparable(text: str) -> str:
    """Normalized, lower-cased form used for containment matching."""
    return normalize(text).lower()
