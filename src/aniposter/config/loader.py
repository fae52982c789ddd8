"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton pattern for Settings instance
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from aniposter.config.models.settings import Settings
from aniposter.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "ANIPOSTER_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path("config/aniposter.toml")


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking to keep the common path lock-free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it on first use."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()
        return self._instance

    def reload_config(self) -> Settings:
        """Force a reload from .env, TOML and the environment."""
        with self._lock:
            self._instance = load_settings()
        return self._instance

    def reset(self) -> None:
        """Drop the cached instance (used by tests)."""
        with self._lock:
            self._instance = None


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Build a Settings instance.

    Sources, lowest to highest precedence: defaults, TOML file (explicit
    path, ``ANIPOSTER_CONFIG_FILE`` or ``config/aniposter.toml`` when it
    exists), environment variables (including a local ``.env``).

    Args:
        config_path: Optional TOML file path.

    Returns:
        Validated Settings.

    Raises:
        ApplicationError: If the configuration is invalid or unreadable.
    """
    load_dotenv(Path(".env"), override=False)

    path = Path(config_path) if config_path else Path(os.getenv(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))
    context = ErrorContext(
        operation="load_settings",
        additional_data={"config_path": str(path)},
    )

    try:
        if path.exists():
            logger.debug("Loading configuration from %s", path)
            return Settings.from_toml_file(path)
        if config_path:
            msg = f"Configuration file not found: {path}"
            raise FileNotFoundError(msg)
        return Settings()
    except ValidationError as e:
        raise ApplicationError(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=f"Invalid configuration: {e.error_count()} error(s)",
            context=context,
            original_error=e,
        ) from e
    except (OSError, ValueError) as e:
        raise ApplicationError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Failed to read configuration: {e}",
            context=context,
            original_error=e,
        ) from e


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance."""
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload the global settings instance."""
    return _loader.reload_config()


def reset_config() -> None:
    """Forget the global settings instance."""
    _loader.reset()
