"""AniPoster Configuration Module

This module provides unified access to configuration models and settings
management for the AniPoster application.
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config, reset_config
from .models import (
    APISettings,
    AppSettings,
    CacheSettings,
    JikanSettings,
    LoggingSettings,
    PipelineSettings,
    Settings,
)

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "JikanSettings",
    "LoggingSettings",
    "PipelineSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
    "reset_config",
]
