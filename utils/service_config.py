"""Service endpoints and transport settings, loaded from config.json and the environment."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from loguru import logger

from utils.constants import (
    CONFIG_FILE,
    DEFAULT_API_BASE_URL,
    DEFAULT_AUTH_BASE_URL,
    DEFAULT_IMPERSONATE,
    DEFAULT_REQUEST_TIMEOUT,
)

API_URL_ENV = "PHOTO_CARDS_API_URL"
AUTH_URL_ENV = "PHOTO_CARDS_AUTH_URL"
API_TOKEN_ENV = "PHOTO_CARDS_API_TOKEN"
TIMEOUT_ENV = "PHOTO_CARDS_TIMEOUT"


@dataclass(frozen=True)
class ServiceConfig:
    """Where the User/Card and Auth APIs live and how to talk to them."""

    api_base_url: str = DEFAULT_API_BASE_URL
    auth_base_url: str = DEFAULT_AUTH_BASE_URL
    # Static group token for the card API; when empty the session token is sent instead
    api_token: str = ""
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    impersonate: str = DEFAULT_IMPERSONATE


def _load_json_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        logger.warning(f"Invalid JSON at {path}: {exc}; using default service config")
        return {}
    except OSError as exc:
        logger.warning(f"Failed to read {path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_timeout(value: Any, default: float) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid request timeout {value!r}; using {default}s")
        return default
    return timeout if timeout > 0 else default


def load_service_config(config_file: Path = CONFIG_FILE) -> ServiceConfig:
    """Build the service config from ``config_file`` overlaid with environment variables."""
    config = ServiceConfig()
    data = _load_json_file(config_file)

    overrides: dict[str, Any] = {}
    for key in ("api_base_url", "auth_base_url", "api_token", "impersonate"):
        value = data.get(key)
        if isinstance(value, str) and value:
            overrides[key] = value
    if "request_timeout" in data:
        overrides["request_timeout"] = _coerce_timeout(
            data["request_timeout"], config.request_timeout
        )

    env_map = {
        API_URL_ENV: "api_base_url",
        AUTH_URL_ENV: "auth_base_url",
        API_TOKEN_ENV: "api_token",
    }
    for env_name, field_name in env_map.items():
        value = os.getenv(env_name)
        if value:
            overrides[field_name] = value
    env_timeout = os.getenv(TIMEOUT_ENV)
    if env_timeout:
        overrides["request_timeout"] = _coerce_timeout(env_timeout, config.request_timeout)

    return replace(config, **overrides)


__all__ = ["ServiceConfig", "load_service_config"]
