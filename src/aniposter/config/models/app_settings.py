"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseModel):
    """Application metadata."""

    name: str = Field(default="AniPoster", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Optional JSON log file")
    rich_console: bool = Field(default=True, description="Use Rich console output")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            msg = f"level must be one of {_LOG_LEVELS}, got {value!r}"
            raise ValueError(msg)
        return upper


__all__ = [
    "AppSettings",
    "LoggingSettings",
]
