"""AniPoster Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from aniposter.config.models.api_settings import APISettings
from aniposter.config.models.app_settings import AppSettings, LoggingSettings
from aniposter.config.models.cache_settings import CacheSettings
from aniposter.config.models.pipeline_settings import PipelineSettings


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Nested values are overridable from the environment, e.g.
    ``ANIPOSTER_PIPELINE__BATCH_SIZE=5`` or ``ANIPOSTER_CACHE__PATH=/tmp/c.json``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ANIPOSTER_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats values passed in from a TOML file
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
