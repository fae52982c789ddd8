"""Cache command handler: inspect or clear the persisted image cache."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aniposter.cli.common.context import get_cli_context
from aniposter.cli.json_formatter import format_json_output
from aniposter.config.loader import get_config
from aniposter.services.image_cache import PersistentImageCache
from aniposter.shared.constants import BASE_HOUR, MILLIS_PER_SECOND, CLICommands, CLIDefaults, CLIMessages

logger = logging.getLogger(__name__)


def _format_age(age_ms: int | None) -> str:
    if age_ms is None:
        return "-"
    return f"{age_ms / (BASE_HOUR * MILLIS_PER_SECOND):.2f} h"


def build_cache(cache_file: Path | None = None) -> PersistentImageCache:
    """Build the image cache from settings, honoring a path override."""
    settings = get_config().cache
    return PersistentImageCache(
        cache_file or settings.resolved_path,
        settings.expiry_ms,
    )


def handle_cache_command(
    *,
    stats: bool = False,
    clear: bool = False,
    show: bool = False,
    cache_file: Path | None = None,
    cache: PersistentImageCache | None = None,
) -> int:
    """Handle the cache command. Shows statistics when no action is given.

    Returns:
        Exit code
    """
    json_output = get_cli_context().is_json_output_enabled()
    cache = cache or build_cache(cache_file)
    console = Console()

    if clear:
        removed = cache.clear()
        logger.info("Image cache cleared (file removed: %s)", removed)
        if json_output:
            typer.echo(
                format_json_output(
                    success=True,
                    command=CLICommands.CACHE,
                    data={"cleared": removed, "path": str(cache.path)},
                ).decode("utf-8")
            )
        else:
            console.print(CLIMessages.CACHE_CLEARED)
        return CLIDefaults.EXIT_SUCCESS

    snapshot = cache.load()

    if json_output:
        data = cache.stats()
        if show:
            data["images"] = snapshot.images if snapshot else {}
        typer.echo(format_json_output(success=True, command=CLICommands.CACHE, data=data).decode("utf-8"))
        return CLIDefaults.EXIT_SUCCESS

    if snapshot is None:
        console.print(CLIMessages.CACHE_EMPTY)
        return CLIDefaults.EXIT_SUCCESS

    if show:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Title", style="cyan")
        table.add_column("Image URL", style="green")
        for name, url in sorted(snapshot.images.items()):
            table.add_row(escape(name), escape(url))
        console.print(table)

    if stats or not show:
        info = cache.stats()
        table = Table(show_header=True, header_style="bold magenta", title="Image Cache")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Path", escape(info["path"]))
        table.add_row("Entries", str(info["entries"]))
        table.add_row("Age", _format_age(info["age_ms"]))
        table.add_row("Expires In", _format_age(info["expires_in_ms"]))
        console.print(table)

    return CLIDefaults.EXIT_SUCCESS
