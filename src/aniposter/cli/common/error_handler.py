"""
CLI Error Handling Utilities

Maps exceptions raised by commands to exit codes and renders them either as
a rich message on stderr or as a JSON envelope on stdout.
"""

from __future__ import annotations

import logging
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from aniposter.cli.json_formatter import format_json_output
from aniposter.shared.constants import CLIDefaults, CLIMessages
from aniposter.shared.errors import (
    AniPosterError,
    ApplicationError,
    ErrorCode,
    InfrastructureError,
)

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def _exit_code_for(error: Exception) -> int:
    if isinstance(error, KeyboardInterrupt):
        return EXIT_INTERRUPTED
    if isinstance(error, AniPosterError) and error.code == ErrorCode.NO_RECOMMENDATIONS:
        return CLIDefaults.EXIT_NO_RESULTS
    return CLIDefaults.EXIT_ERROR


def _describe(error: Exception) -> tuple[str, str]:
    """Return (error_code, message) for display."""
    if isinstance(error, AniPosterError):
        return error.code.value, error.message
    if isinstance(error, KeyboardInterrupt):
        return ErrorCode.OPERATION_CANCELLED.value, "Command interrupted by user"
    if isinstance(error, OSError):
        return ErrorCode.FILE_READ_ERROR.value, f"File system error: {error}"
    return ErrorCode.CLI_UNEXPECTED_ERROR.value, f"Unexpected error: {error}"


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle CLI errors with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    error_code, message = _describe(error)
    exit_code = _exit_code_for(error)
    error_context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": error_code,
    }

    if isinstance(error, KeyboardInterrupt):
        logger.warning("Command interrupted: %s", command, extra={"context": error_context})
    elif isinstance(error, (ApplicationError, InfrastructureError)) or exit_code == CLIDefaults.EXIT_NO_RESULTS:
        logger.warning("%s failed: %s", command, message, extra={"context": error_context})
    elif isinstance(error, AniPosterError):
        logger.error("%s failed: %s", command, message, extra={"context": error_context})
    else:
        logger.exception("CLI error in %s: %s", command, message, extra={"context": error_context})

    if json_output:
        typer.echo(
            format_json_output(
                success=False,
                command=command,
                errors=[message],
                data={**error_context, "exit_code": exit_code},
            ).decode("utf-8")
        )
    else:
        Console(stderr=True).print(CLIMessages.ERROR.format(error=escape(message)), markup=True)

    return exit_code
