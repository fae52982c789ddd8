"""
CLI Context Management Module

Holds the global options parsed by the main callback (verbosity, log level,
JSON output) in a pydantic model stored in a ContextVar, so every command
reads them the same way.
"""

from __future__ import annotations

import contextvars
from enum import Enum

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    CLI context model for managing global state.

    Attributes:
        verbose: Verbosity level (0 = normal, 1+ = verbose)
        log_level: Logging level
        json_output: Whether to output newline-delimited JSON
    """

    verbose: int = Field(default=0, ge=0, description="Verbosity level")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_output: bool = Field(default=False, description="Whether to output JSON")

    def is_verbose(self) -> bool:
        return self.verbose > 0

    def get_effective_log_level(self) -> str:
        """
        Get the effective log level; verbose forces DEBUG.

        Returns:
            str: Effective log level
        """
        if self.is_verbose():
            return LogLevel.DEBUG.value
        return self.log_level.value

    def is_json_output_enabled(self) -> bool:
        return self.json_output


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """
    Get the current CLI context, or a default one if none was set.

    Returns:
        CliContext: Current CLI context
    """
    context = cli_context_var.get()
    if context is None:
        return CliContext()
    return context


def set_cli_context(context: CliContext) -> None:
    cli_context_var.set(context)


def clear_cli_context() -> None:
    """Clear the current CLI context."""
    cli_context_var.set(None)
