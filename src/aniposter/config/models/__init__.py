"""Configuration domain models."""

from __future__ import annotations

from .api_settings import APISettings, JikanSettings
from .app_settings import AppSettings, LoggingSettings
from .cache_settings import CacheSettings
from .pipeline_settings import PipelineSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "JikanSettings",
    "LoggingSettings",
    "PipelineSettings",
    "Settings",
]
