"""
JSON Output Formatter for the AniPoster CLI

With ``--json`` every command writes newline-delimited JSON: one object per
pipeline event and a final envelope carrying the command result.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson

from aniposter.shared.models.events import PipelineEvent


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """
    Format a command result as one JSON line.

    Args:
        success: Whether the command executed successfully
        command: The command name (e.g., "resolve", "cache")
        data: The command's output data
        errors: List of error messages
        warnings: List of warning messages

    Returns:
        JSON-encoded bytes without a trailing newline
    """
    errors = errors or []
    if errors:
        success = False

    json_data = {
        "success": success,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": data,
        "errors": errors,
        "warnings": warnings or [],
    }

    try:
        return orjson.dumps(json_data, option=orjson.OPT_SORT_KEYS)
    except TypeError as e:
        return orjson.dumps(
            {
                "success": False,
                "timestamp": json_data["timestamp"],
                "command": command,
                "data": None,
                "errors": [f"JSON serialization failed: {e!s}"],
                "warnings": [],
            },
            option=orjson.OPT_SORT_KEYS,
        )


def format_json_event(event: PipelineEvent) -> bytes:
    """Encode one pipeline event as a JSON line."""
    payload: dict[str, Any] = {"event": event.kind, "batch_index": event.batch_index}
    if event.card is not None:
        payload["name"] = event.card.name
        payload["image_url"] = event.card.image_url
    return orjson.dumps(payload)
