"""AniPoster Error Handling Module

This module defines the error handling system for AniPoster, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved

Pipeline failure taxonomy:
- ProviderRateLimitedError: HTTP 429 from the media provider
- TransientProviderError: any other provider failure, including image decode
- ImageNotFoundError: every search variation exhausted for one title
- CacheIOError: durable cache storage read/write/parse failure
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for AniPoster application.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Media Provider Errors
    PROVIDER_RATE_LIMITED = "PROVIDER_RATE_LIMITED"
    PROVIDER_REQUEST_FAILED = "PROVIDER_REQUEST_FAILED"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    PROVIDER_INVALID_RESPONSE = "PROVIDER_INVALID_RESPONSE"
    IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

    # Cache Errors
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"

    # Recommendation Payload Errors
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    NO_RECOMMENDATIONS = "NO_RECOMMENDATIONS"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    FILE_READ_ERROR = "FILE_READ_ERROR"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Application Errors
    APPLICATION_ERROR = "APPLICATION_ERROR"
    OPERATION_CANCELLED = "OPERATION_CANCELLED"

    # CLI Errors
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization.

    Attributes:
        operation: Optional operation name that caused the error
        title: Optional anime title the error relates to
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    title: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as dict for logging.

        Returns:
            Dictionary with set fields and a guaranteed additional_data key.
        """
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.title is not None:
            data["title"] = self.title
        data["additional_data"] = self.additional_data or {}
        return data


class AniPosterError(Exception):
    """Base exception class for all AniPoster errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize AniPosterError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(AniPosterError):
    """Domain-specific errors.

    These errors occur when business rules are not met, e.g. no catalog
    entry matches a recommended title or a payload has no usable records.
    """


class InfrastructureError(AniPosterError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems like the
    media provider API or the local cache file.
    """


class ApplicationError(AniPosterError):
    """Application-level errors such as cancellation or bad CLI input."""


class ProviderRateLimitedError(InfrastructureError):
    """The media provider answered HTTP 429."""

    def __init__(
        self,
        query: str,
        retry_after: float | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        self.query = query
        self.retry_after = retry_after
        super().__init__(
            code=ErrorCode.PROVIDER_RATE_LIMITED,
            message=f"Rate limited while searching for: {query}",
            context=context,
        )


class TransientProviderError(InfrastructureError):
    """A per-attempt provider failure counted against the attempt budget."""


class ImageNotFoundError(DomainError):
    """No verified image could be found for a title after all variations."""

    def __init__(self, title: str, attempts: int = 0) -> None:
        self.title = title
        self.attempts = attempts
        super().__init__(
            code=ErrorCode.IMAGE_NOT_FOUND,
            message=f"No matching image found for: {title}",
            context=ErrorContext(
                operation="resolve_image",
                title=title,
                additional_data={"attempts": attempts},
            ),
        )


class CacheIOError(InfrastructureError):
    """Durable cache storage could not be read, parsed or written."""


class OperationCancelledError(ApplicationError):
    """A pipeline run was cancelled cooperatively."""

    def __init__(self, operation: str = "resolve_all") -> None:
        super().__init__(
            code=ErrorCode.OPERATION_CANCELLED,
            message="Operation was cancelled",
            context=ErrorContext(operation=operation),
        )


class RecommendationPayloadError(DomainError):
    """A recommendation service payload had no usable records."""


def create_transient_error(
    message: str,
    query: str,
    code: ErrorCode = ErrorCode.PROVIDER_REQUEST_FAILED,
    original_error: Exception | None = None,
    status_code: int | None = None,
) -> TransientProviderError:
    """Create a TransientProviderError for one provider attempt.

    Args:
        message: Error message
        query: Search variation or image URL being processed
        code: Specific error code
        original_error: Original exception
        status_code: HTTP status code when one was received

    Returns:
        TransientProviderError instance
    """
    additional_data: dict[str, PrimitiveContextValue] = {"query": query}
    if status_code is not None:
        additional_data["status_code"] = status_code
    return TransientProviderError(
        code=code,
        message=message,
        context=ErrorContext(operation="provider_request", additional_data=additional_data),
        original_error=original_error,
    )


def create_cache_error(
    message: str,
    code: ErrorCode,
    cache_path: str | Path,
    original_error: Exception | None = None,
) -> CacheIOError:
    """Create a CacheIOError for a cache file operation.

    Args:
        message: Error message
        code: Specific error code
        cache_path: Path of the cache file
        original_error: Original exception

    Returns:
        CacheIOError instance
    """
    return CacheIOError(
        code=code,
        message=message,
        context=ErrorContext(
            operation="image_cache",
            additional_data={"cache_path": str(cache_path)},
        ),
        original_error=original_error,
    )
