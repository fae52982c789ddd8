"""
Reusable Typer Options Module

Common option definitions shared by the main callback and the commands.
Each name holds the ``typer.Option`` itself; use sites attach it with
``Annotated[<type>, <option>]``.
"""

from __future__ import annotations

import typer

from aniposter.shared.constants import CLIHelp

# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO.",
)

json_output_option = typer.Option(
    "--json",
    help="Emit newline-delimited JSON instead of human-readable output.",
)

# Version option - for main app only
version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
)

no_cache_option = typer.Option("--no-cache", help=CLIHelp.NO_CACHE_HELP)

cache_file_option = typer.Option("--cache-file", help=CLIHelp.CACHE_FILE_HELP, dir_okay=False)
