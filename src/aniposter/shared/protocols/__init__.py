"""Protocol interfaces."""

from .media_provider import MediaSearchProvider

__all__ = ["MediaSearchProvider"]
