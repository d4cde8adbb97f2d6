"""YAML config loader with environment overrides and dotted-key lookup."""

import os
from pathlib import Path
from typing import Any

import yaml

from forecaster.config.defaults import DEFAULT_CITIES
from forecaster.config.schema import AppConfig

ENV_OPENWEATHER_API_KEY = "OPENWEATHER_API_KEY"
ENV_GOOGLEMAPS_API_KEY = "GOOGLEMAPS_API_KEY"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. If no cities are specified, injects
    DEFAULT_CITIES. Empty API keys are filled from the environment.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if "cities" not in raw or not raw["cities"]:
        raw["cities"] = [c.model_dump() for c in DEFAULT_CITIES]

    _apply_env_key(raw, "openweather", ENV_OPENWEATHER_API_KEY)
    _apply_env_key(raw, "geocoding", ENV_GOOGLEMAPS_API_KEY)

    return AppConfig(**raw)


def _apply_env_key(raw: dict[str, Any], section: str, env_var: str) -> None:
    value = os.environ.get(env_var, "")
    if not value:
        return
    block = raw.setdefault(section, {}) or {}
    if not block.get("api_key"):
        block["api_key"] = value
    raw[section] = block


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'openweather.vendor_timezone'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
