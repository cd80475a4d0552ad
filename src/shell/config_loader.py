"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, MapConfig, ...) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import (
    Config,
    ControlsConfig,
    MapConfig,
    PulseConfig,
    TownsApiConfig,
)


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be a ${VAR} environment placeholder.

    Args:
        value: Value to resolve

    Returns:
        Environment value if the placeholder is set, else the value unchanged
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


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section with placeholders resolved."""
    section = data.get(name) or {}
    return {key: _resolve_value(value) for key, value in section.items()}


def _parse_bool(value: Any) -> bool:
    """Parse a boolean that may arrive as a string from an env placeholder."""
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "yes", "on", "1"):
            return True
        if normalized in ("false", "no", "off", "0", ""):
            return False
        raise ValueError(f"Invalid boolean value: {value!r}")
    return bool(value)


def _parse_map(data: dict[str, Any]) -> MapConfig:
    """Parse viewport settings from config data."""
    defaults = MapConfig()
    center = data.get("center") or {}
    return MapConfig(
        center_latitude=float(center.get("lat", defaults.center_latitude)),
        center_longitude=float(center.get("lng", defaults.center_longitude)),
        zoom=int(data.get("zoom", defaults.zoom)),
        max_zoom=int(data.get("max_zoom", defaults.max_zoom)),
        tile_url=data.get("tile_url", defaults.tile_url),
        attribution=data.get("attribution", defaults.attribution),
    )


def _parse_api(data: dict[str, Any]) -> TownsApiConfig:
    """Parse town feed settings from config data."""
    defaults = TownsApiConfig()
    return TownsApiConfig(
        base_url=data.get("base_url", defaults.base_url),
        timeout_seconds=int(data.get("timeout_seconds", defaults.timeout_seconds)),
    )


def _parse_controls(data: dict[str, Any]) -> ControlsConfig:
    """Parse reload/slider settings from config data."""
    defaults = ControlsConfig()
    return ControlsConfig(
        initial_town_count=int(data.get("initial_town_count", defaults.initial_town_count)),
        slider_min=int(data.get("slider_min", defaults.slider_min)),
        slider_max=int(data.get("slider_max", defaults.slider_max)),
        slider_step=int(data.get("slider_step", defaults.slider_step)),
        debounce_ms=int(data.get("debounce_ms", defaults.debounce_ms)),
        reload_position=data.get("reload_position", defaults.reload_position),
        reload_label=data.get("reload_label", defaults.reload_label),
    )


def _parse_pulse(data: dict[str, Any]) -> PulseConfig:
    """Parse pulse animation settings from config data."""
    defaults = PulseConfig()
    return PulseConfig(
        enabled=_parse_bool(data.get("enabled", defaults.enabled)),
        radius_delta=float(data.get("radius_delta", defaults.radius_delta)),
        opacity_delta=float(data.get("opacity_delta", defaults.opacity_delta)),
        phase_duration_ms=int(data.get("phase_duration_ms", defaults.phase_duration_ms)),
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
    return Config(
        map=_parse_map(_section(data, "map")),
        api=_parse_api(_section(data, "api")),
        controls=_parse_controls(_section(data, "controls")),
        pulse=_parse_pulse(_section(data, "pulse")),
        notification_message=data.get(
            "notification_message",
            defaults.notification_message,
        ),
    )


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
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

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

    logger.info(
        "Loaded config: feed %s, %d initial towns",
        config.api.base_url,
        config.controls.initial_town_count,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        TOWNS_API_URL: Town feed URL prefix
        INITIAL_TOWN_COUNT: Town count before any slider input
        DEBOUNCE_MS: Slider quiet period in milliseconds
        REQUEST_TIMEOUT: Feed request timeout in seconds

    Returns:
        Config object from environment
    """
    api = TownsApiConfig()
    controls = ControlsConfig()

    base_url = os.environ.get("TOWNS_API_URL")
    if base_url:
        api.base_url = base_url

    timeout = os.environ.get("REQUEST_TIMEOUT")
    if timeout:
        api.timeout_seconds = int(timeout)

    initial_count = os.environ.get("INITIAL_TOWN_COUNT")
    if initial_count:
        controls.initial_town_count = int(initial_count)

    debounce_ms = os.environ.get("DEBOUNCE_MS")
    if debounce_ms:
        controls.debounce_ms = int(debounce_ms)

    return Config(api=api, controls=controls)
