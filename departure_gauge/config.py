"""Configuration loader for the departure readiness engine."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml

from departure_gauge.data.routes_client import DEFAULT_FIELD_MASK, DEFAULT_TRAVEL_MODE, ROUTES_API_URL


@dataclass(frozen=True)
class RoutesConfig:
    """Routing provider configuration."""

    api_key: str
    api_url: str
    field_mask: str
    travel_mode: str
    timeout_seconds: float


@dataclass(frozen=True)
class RefreshConfig:
    """Adaptive refresh configuration."""

    base_interval_seconds: int


@dataclass(frozen=True)
class SearchConfig:
    default_max_wait_minutes: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str | None


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    routes: RoutesConfig
    refresh: RefreshConfig
    search: SearchConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _section(data: dict[str, Any], name: str, required: bool = True) -> dict[str, Any]:
    if name not in data:
        if required:
            raise ValueError(f"Missing required key '{name}' in {name} config")
        return {}
    section = data[name]
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' config must be a mapping")
    return section


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    api_key = os.environ.get("GOOGLE_MAPS_API_KEY", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    routes_section = _section(data, "routes", required=False)
    refresh_section = _section(data, "refresh")
    search_section = _section(data, "search")
    logging_section = _section(data, "logging")

    routes = RoutesConfig(
        api_key=api_key,
        api_url=routes_section.get("api_url", ROUTES_API_URL),
        field_mask=routes_section.get("field_mask", DEFAULT_FIELD_MASK),
        travel_mode=routes_section.get("travel_mode", DEFAULT_TRAVEL_MODE),
        timeout_seconds=routes_section.get("timeout_seconds", 10),
    )

    base_interval = _require_key(refresh_section, "base_interval_seconds", "refresh")
    if not isinstance(base_interval, int) or base_interval <= 0:
        raise ValueError("'base_interval_seconds' in refresh config must be a positive integer")
    refresh = RefreshConfig(base_interval_seconds=base_interval)

    max_wait = _require_key(search_section, "default_max_wait_minutes", "search")
    if not isinstance(max_wait, int) or not 1 <= max_wait <= 120:
        raise ValueError("'default_max_wait_minutes' in search config must be between 1 and 120")
    search = SearchConfig(default_max_wait_minutes=max_wait)

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=logging_section.get("log_dir"),
    )

    return AppConfig(routes=routes, refresh=refresh, search=search, log=logging)
