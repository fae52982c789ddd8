"""
CLI Configuration Constants

This module contains all constants related to command-line interface
configuration, default values, and user interaction settings.
"""


class CLIDefaults:
    """CLI default values."""

    VERSION = "0.1.0"

    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_NO_RESULTS = 2

    STDIN_MARKER = "-"
    PLACEHOLDER = "(no image)"


class CLICommands:
    """CLI command names."""

    RESOLVE = "resolve"
    CACHE = "cache"
    VARIATIONS = "variations"


class CLIHelp:
    """CLI help text."""

    APP_NAME = "aniposter"
    APP_DESCRIPTION = "Resolve display images for anime recommendations."
    APP_STYLE = "rich"
    VERSION_TEXT = "AniPoster v{version}"

    RESOLVE_HELP = "Resolve poster images for a recommendation payload."
    RESOLVE_PAYLOAD_HELP = "Recommendation JSON file, or '-' to read stdin."
    CACHE_HELP = "Inspect or clear the persisted image cache."
    VARIATIONS_HELP = "Show the search variations generated for a title."
    NO_CACHE_HELP = "Do not read or write the persisted image cache."
    CACHE_FILE_HELP = "Override the image cache file location."


class CLIMessages:
    """CLI message templates."""

    FIRST_BATCH_DONE = "[dim]First batch settled, remaining titles continue in the background[/dim]"
    CARD_READY = "[green]ready[/green] {name} -> {url}"
    SUMMARY = "Resolved {resolved} of {total} titles"
    CACHE_CLEARED = "[green]Image cache cleared[/green]"
    CACHE_EMPTY = "[yellow]Image cache is empty or expired[/yellow]"
    ERROR = "[red]{error}[/red]"
