"""
AniPoster Constants Module

This module provides centralized constants for the AniPoster application.
All magic values and configuration constants are defined here to ensure
consistency across the codebase.
"""

from .cache import Cache
from .cli import CLICommands, CLIDefaults, CLIHelp, CLIMessages
from .http_codes import HTTPHeaders, HTTPStatusCodes
from .network import JikanConfig, NetworkConfig, RetryConfig, SearchLinks
from .pipeline import PipelineConfig, PipelineEventKind
from .system import BASE_HOUR, BASE_MILLISECOND, BASE_MINUTE, BASE_SECOND, MILLIS_PER_SECOND

__all__ = [
    "BASE_HOUR",
    "BASE_MILLISECOND",
    "BASE_MINUTE",
    "BASE_SECOND",
    "MILLIS_PER_SECOND",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "Cache",
    "HTTPHeaders",
    "HTTPStatusCodes",
    "JikanConfig",
    "NetworkConfig",
    "PipelineConfig",
    "PipelineEventKind",
    "RetryConfig",
    "SearchLinks",
]
