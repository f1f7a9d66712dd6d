"""Configuration and persistence for client settings."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import (
    ClientConfig,
    ConfigError,
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

SETTINGS_NAME = "settings"

ENV_HOME = "INSIGHTLY_HOME"
ENV_API_KEY = "INSIGHTLY_API_KEY"
ENV_BASE_URL = "INSIGHTLY_BASE_URL"
ENV_API_VERSION = "INSIGHTLY_API_VERSION"
ENV_TIMEOUT = "INSIGHTLY_TIMEOUT"


def get_base_dir() -> Path:
    """
    Get the base directory for storing configuration.

    The directory is determined by:
    1. Environment variable INSIGHTLY_HOME if set
    2. Otherwise, ~/.insightly

    The directory is created if it does not exist.

    Returns:
        Path to the base directory
    """
    env_home = os.environ.get(ENV_HOME)
    if env_home:
        base_dir = Path(env_home)
    else:
        base_dir = Path.home() / ".insightly"

    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir


def config_path(name: str) -> Path:
    """Get the path of a named JSON file in the base directory."""
    return get_base_dir() / f"{name}.json"


def save_json(name: str, data: dict) -> Path:
    """
    Save a dictionary as JSON in the base directory.

    Args:
        name: File name without extension
        data: Dictionary to save

    Returns:
        Path to the saved file
    """
    path = config_path(name)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved JSON to {path}")
        return path
    except (OSError, TypeError, ValueError) as e:
        raise ConfigError(f"Failed to save JSON to {path}: {e}") from e


def load_json(name: str) -> dict:
    """
    Load a dictionary from a JSON file in the base directory.

    Raises:
        ConfigError: If the file does not exist or JSON is invalid
    """
    path = config_path(name)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from {path}")
        return data
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to load JSON from {path}: {e}") from e


def save_settings(
    base_url: str = DEFAULT_BASE_URL,
    api_version: str = DEFAULT_API_VERSION,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> Path:
    """
    Persist non-secret client settings.

    The API key is never written to disk.

    Returns:
        Path to the saved settings file
    """
    data = {
        "base_url": base_url,
        "api_version": api_version,
        "timeout_seconds": timeout_seconds,
    }
    return save_json(SETTINGS_NAME, data)


def load_settings() -> dict[str, Any]:
    """
    Load saved settings, falling back to defaults when none are saved.

    Raises:
        ConfigError: If the settings file exists but is invalid
    """
    settings: dict[str, Any] = {
        "base_url": DEFAULT_BASE_URL,
        "api_version": DEFAULT_API_VERSION,
        "timeout_seconds": DEFAULT_TIMEOUT_SECONDS,
    }
    if config_path(SETTINGS_NAME).exists():
        settings.update(load_json(SETTINGS_NAME))
    return settings


def load_client_config(api_key: str | None = None) -> ClientConfig:
    """
    Build a ClientConfig from saved settings and the environment.

    Environment variables INSIGHTLY_BASE_URL, INSIGHTLY_API_VERSION and
    INSIGHTLY_TIMEOUT override saved settings. The API key comes from the
    argument or INSIGHTLY_API_KEY.

    Args:
        api_key: Explicit API key (takes precedence over the environment)

    Returns:
        The resolved ClientConfig

    Raises:
        ConfigError: If no API key is available or a setting is invalid
    """
    api_key = api_key or os.environ.get(ENV_API_KEY)
    if not api_key:
        raise ConfigError(
            f"No API key provided. Pass one explicitly or set {ENV_API_KEY}."
        )

    settings = load_settings()
    if os.environ.get(ENV_BASE_URL):
        settings["base_url"] = os.environ[ENV_BASE_URL]
    if os.environ.get(ENV_API_VERSION):
        settings["api_version"] = os.environ[ENV_API_VERSION]
    if os.environ.get(ENV_TIMEOUT):
        settings["timeout_seconds"] = os.environ[ENV_TIMEOUT]

    try:
        return ClientConfig.from_dict(api_key, settings)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid client settings: {e}") from e
