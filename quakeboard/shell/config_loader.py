"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, MapConfig) are defined in quakeboard/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakeboard.core.config import Config, MapConfig, validate_config


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Non-strings and plain strings are returned unchanged; an unset
    variable leaves the placeholder in place.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0")


def _parse_bool(value: Any) -> bool:
    """Parse a YAML bool or a string such as "false" from the environment.

    Raises:
        ValueError: If a string is not a recognized boolean
    """
    value = _resolve_value(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean value: {value!r}")
    return bool(value)


def _parse_time_filter(value: Any) -> int | None:
    """Parse the default time filter; 0, "none" or null mean no limit."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("", "none", "all"):
        return None
    minutes = int(value)
    return minutes if minutes > 0 else None


def _parse_map(data: dict[str, Any]) -> MapConfig:
    """Parse map settings from config data."""
    defaults = MapConfig()
    return MapConfig(
        tile_url=_resolve_value(data.get("tile_url", defaults.tile_url)),
        width=int(data.get("width", defaults.width)),
        height=int(data.get("height", defaults.height)),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()

    time_filter = defaults.default_time_filter_minutes
    if "default_time_filter_minutes" in data:
        time_filter = _parse_time_filter(data["default_time_filter_minutes"])

    return Config(
        feed_url=_resolve_value(data.get("feed_url", defaults.feed_url)),
        relay_url=_resolve_value(data.get("relay_url", defaults.relay_url)) or "",
        request_timeout_seconds=int(
            data.get("request_timeout_seconds", defaults.request_timeout_seconds)
        ),
        polling_interval_seconds=int(
            data.get("polling_interval_seconds", defaults.polling_interval_seconds)
        ),
        skip_overlapping_polls=_parse_bool(
            data.get("skip_overlapping_polls", defaults.skip_overlapping_polls)
        ),
        default_time_filter_minutes=time_filter,
        default_magnitude_filter=str(
            data.get("default_magnitude_filter", defaults.default_magnitude_filter)
        ),
        display_timezone=data.get("display_timezone", defaults.display_timezone),
        map=_parse_map(data.get("map") or {}),
    )


def _log_validation(config: Config) -> None:
    """Log validation problems; configuration errors are not fatal here."""
    result = validate_config(config)
    for error in result.critical_errors:
        logger.error("Config error in %s: %s", error.field, error.message)
    for warning in result.warnings:
        logger.warning("Config warning in %s: %s", warning.field, warning.message)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)
    _log_validation(config)

    logger.info(
        "Loaded config: feed %s, polling every %ds",
        config.feed_url,
        config.polling_interval_seconds,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        FEED_URL: RSS feed URL
        RELAY_URL: Relay prefix ("" to fetch the feed directly)
        POLL_INTERVAL_SECONDS: Polling interval
        REQUEST_TIMEOUT_SECONDS: Feed request timeout
        DISPLAY_TIMEZONE: Timezone for displayed times
        SKIP_OVERLAPPING_POLLS: "false" to let slow polls overlap

    Returns:
        Config object from environment
    """
    data: dict[str, Any] = {}

    env_keys = {
        "FEED_URL": "feed_url",
        "RELAY_URL": "relay_url",
        "POLL_INTERVAL_SECONDS": "polling_interval_seconds",
        "REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
        "DISPLAY_TIMEZONE": "display_timezone",
        "SKIP_OVERLAPPING_POLLS": "skip_overlapping_polls",
    }
    for env_key, config_key in env_keys.items():
        if env_key in os.environ:
            data[config_key] = os.environ[env_key]

    config = load_config_from_dict(data)
    _log_validation(config)
    return config
