"""
AniPoster Typer CLI Application

Command-line front end for the image resolution pipeline: resolve poster
images for a recommendation payload, inspect the persisted cache and preview
how titles are turned into search variations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Callable, Optional

import typer

from aniposter.cli.cache_handler import handle_cache_command
from aniposter.cli.common.context import CliContext, LogLevel, get_cli_context, set_cli_context
from aniposter.cli.common.error_handler import handle_cli_error
from aniposter.cli.common.options import (
    cache_file_option,
    json_output_option,
    log_level_option,
    no_cache_option,
    verbose_option,
    version_option,
)
from aniposter.cli.resolve_handler import handle_resolve_command
from aniposter.cli.variations_handler import handle_variations_command
from aniposter.config.loader import get_config
from aniposter.shared.constants import CLICommands, CLIDefaults, CLIHelp
from aniposter.shared.logging import setup_structured_logger

__version__ = CLIDefaults.VERSION


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


def main_callback(
    verbose: int,
    log_level: LogLevel,
    json_output: bool,
    version: bool,
) -> None:
    """
    Process the common options before any command runs.

    Sets the global CLI context and configures logging from the effective
    log level and the logging settings.
    """
    if version:
        version_callback(value=True)

    context = CliContext(verbose=verbose, log_level=log_level, json_output=json_output)
    set_cli_context(context)

    logging_settings = get_config().logging
    setup_structured_logger(
        level=context.get_effective_log_level(),
        log_file=logging_settings.file,
        use_rich_console=logging_settings.rich_console,
    )


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
    invoke_without_command=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.INFO,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, json_output, version)
    except typer.Exit:
        raise
    except Exception as e:
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


def _run(command: str, handler: Callable[..., int], /, **kwargs: Any) -> None:
    json_output = get_cli_context().is_json_output_enabled()
    try:
        exit_code = handler(**kwargs)
    except Exception as e:
        exit_code = handle_cli_error(e, command, json_output=json_output)
    if exit_code:
        raise typer.Exit(exit_code)


@app.command(CLICommands.RESOLVE, help=CLIHelp.RESOLVE_HELP)
def resolve_command(
    payload: Annotated[str, typer.Argument(help=CLIHelp.RESOLVE_PAYLOAD_HELP)],
    no_cache: Annotated[bool, no_cache_option] = False,
    cache_file: Annotated[Optional[Path], cache_file_option] = None,
) -> None:
    """
    Resolve poster images for a recommendation payload.

    Cards are printed as soon as they resolve; the ordered grid follows once
    every batch has settled. Titles without an image keep a placeholder.

    Examples:
        aniposter resolve recommendations.json
        curl -s $RECOMMENDER/recommend | aniposter --json resolve -
    """
    _run(
        CLICommands.RESOLVE,
        handle_resolve_command,
        payload=payload,
        no_cache=no_cache,
        cache_file=cache_file,
    )


@app.command(CLICommands.CACHE, help=CLIHelp.CACHE_HELP)
def cache_command(
    stats: Annotated[bool, typer.Option("--stats", help="Show cache statistics.")] = False,
    clear: Annotated[bool, typer.Option("--clear", help="Delete the cache snapshot.")] = False,
    show: Annotated[bool, typer.Option("--show", help="List cached titles and image URLs.")] = False,
    cache_file: Annotated[Optional[Path], cache_file_option] = None,
) -> None:
    """Inspect or clear the persisted image cache."""
    _run(
        CLICommands.CACHE,
        handle_cache_command,
        stats=stats,
        clear=clear,
        show=show,
        cache_file=cache_file,
    )


@app.command(CLICommands.VARIATIONS, help=CLIHelp.VARIATIONS_HELP)
def variations_command(
    name: Annotated[str, typer.Argument(help="Anime title.")],
) -> None:
    """Show the normalized title and its ordered search variations."""
    _run(CLICommands.VARIATIONS, handle_variations_command, name=name)


if __name__ == "__main__":
    app()
