"""Shared CLI plumbing: context, options and error handling."""

from .context import CliContext, LogLevel, get_cli_context, set_cli_context
from .error_handler import handle_cli_error

__all__ = [
    "CliContext",
    "LogLevel",
    "get_cli_context",
    "handle_cli_error",
    "set_cli_context",
]
