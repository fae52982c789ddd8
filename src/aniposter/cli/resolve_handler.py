"""Resolve command handler for the AniPoster CLI.

Reads a recommendation payload, streams resolved cards to the console as
they land and finishes with the ordered grid (placeholders included).
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aniposter.cli.common.context import get_cli_context
from aniposter.cli.json_formatter import format_json_event, format_json_output
from aniposter.config.loader import get_config
from aniposter.config.models.settings import Settings
from aniposter.core.recommendations import parse_recommendation_payload
from aniposter.services.card_service import CardService
from aniposter.shared.constants import CLICommands, CLIDefaults, CLIMessages, PipelineEventKind
from aniposter.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    RecommendationPayloadError,
)
from aniposter.shared.models.recommendation import RecommendationRecord, ResolvedCard

logger = logging.getLogger(__name__)


def read_payload(source: str) -> object:
    """Read and decode a JSON payload from a file path or ``-`` for stdin.

    Raises:
        ApplicationError: If the file cannot be read
        RecommendationPayloadError: If the content is not JSON
    """
    try:
        if source == CLIDefaults.STDIN_MARKER:
            raw = sys.stdin.read()
        else:
            raw = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise ApplicationError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Cannot read payload: {e}",
            context=ErrorContext(operation="read_payload", additional_data={"source": source}),
            original_error=e,
        ) from e

    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise RecommendationPayloadError(
            code=ErrorCode.INVALID_PAYLOAD,
            message=f"Payload is not valid JSON: {e}",
            context=ErrorContext(operation="read_payload", additional_data={"source": source}),
            original_error=e,
        ) from e


def apply_cache_overrides(
    settings: Settings,
    *,
    no_cache: bool = False,
    cache_file: Path | None = None,
) -> Settings:
    """Return settings with command-line cache overrides applied."""
    updates: dict[str, object] = {}
    if no_cache:
        updates["enabled"] = False
    if cache_file is not None:
        updates["path"] = cache_file
    if not updates:
        return settings
    return settings.model_copy(update={"cache": settings.cache.model_copy(update=updates)})


async def _run_pipeline(
    service: CardService,
    records: list[RecommendationRecord],
    console: Console,
    *,
    json_output: bool,
) -> list[ResolvedCard | None]:
    async with service:
        async for event in service.stream(records):
            if json_output:
                typer.echo(format_json_event(event).decode("utf-8"))
            elif event.kind == PipelineEventKind.FIRST_BATCH_DONE:
                console.print(CLIMessages.FIRST_BATCH_DONE)
            elif event.card is not None:
                console.print(
                    CLIMessages.CARD_READY.format(
                        name=escape(event.card.name),
                        url=escape(event.card.image_url),
                    )
                )
        return service.grid(records)


def _print_grid(console: Console, grid: list[ResolvedCard | None], records: list[RecommendationRecord]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Genres")
    table.add_column("Rating", justify="right")
    table.add_column("Image", style="green")

    for index, (record, card) in enumerate(zip(records, grid), start=1):
        table.add_row(
            str(index),
            escape(record.name),
            escape(", ".join(record.genres)),
            record.rating_label,
            escape(card.image_url) if card else CLIDefaults.PLACEHOLDER,
        )
    console.print(table)


def handle_resolve_command(
    payload: str,
    *,
    no_cache: bool = False,
    cache_file: Path | None = None,
    service: CardService | None = None,
) -> int:
    """Handle the resolve command.

    Args:
        payload: Payload file path or ``-`` for stdin
        no_cache: Disable the persisted image cache for this run
        cache_file: Override the cache file location
        service: Preconfigured card service (tests)

    Returns:
        Exit code
    """
    json_output = get_cli_context().is_json_output_enabled()
    records = parse_recommendation_payload(read_payload(payload))

    if service is None:
        settings = apply_cache_overrides(get_config(), no_cache=no_cache, cache_file=cache_file)
        service = CardService(settings)

    console = Console()
    grid = asyncio.run(_run_pipeline(service, records, console, json_output=json_output))
    resolved = sum(1 for card in grid if card is not None)

    if json_output:
        typer.echo(
            format_json_output(
                success=True,
                command=CLICommands.RESOLVE,
                data={
                    "total": len(records),
                    "resolved": resolved,
                    "cards": [
                        {
                            "name": record.name,
                            "image_url": card.image_url if card else None,
                            "search_url": card.search_url if card else None,
                        }
                        for record, card in zip(records, grid)
                    ],
                },
            ).decode("utf-8")
        )
    else:
        _print_grid(console, grid, records)
        console.print(CLIMessages.SUMMARY.format(resolved=resolved, total=len(records)))

    logger.info("Resolved %d of %d titles", resolved, len(records))
    return CLIDefaults.EXIT_SUCCESS if resolved else CLIDefaults.EXIT_NO_RESULTS
