"""Variations command handler: show how a title will be searched."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aniposter.cli.common.context import get_cli_context
from aniposter.cli.json_formatter import format_json_output
from aniposter.core.normalization import normalize, variations_for
from aniposter.shared.constants import CLICommands, CLIDefaults


def handle_variations_command(name: str) -> int:
    """Print the normalized form and the ordered search variations of ``name``."""
    normalized = normalize(name)
    variations = variations_for(name)

    if get_cli_context().is_json_output_enabled():
        typer.echo(
            format_json_output(
                success=True,
                command=CLICommands.VARIATIONS,
                data={"name": name, "normalized": normalized, "variations": variations},
            ).decode("utf-8")
        )
        return CLIDefaults.EXIT_SUCCESS

    console = Console()
    console.print(f"Normalized: [cyan]{escape(normalized)}[/cyan]")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Variation", style="green")
    for index, variation in enumerate(variations, start=1):
        table.add_row(str(index), escape(variation) if variation.strip() else "[dim](blank, skipped)[/dim]")
    console.print(table)
    return CLIDefaults.EXIT_SUCCESS
