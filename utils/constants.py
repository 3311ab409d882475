"""Constants file."""

import os
import sys
from pathlib import Path

APP_NAME = "Photo Cards"


def _default_base_dir() -> Path:
    """Return the writable base directory for config/cache/logging."""
    if getattr(sys, "frozen", False):
        local_appdata = os.getenv("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / APP_NAME
        return Path.home() / ".photo_cards"
    return Path(__file__).resolve().parent.parent


BASE_DATA_DIR = _default_base_dir()
CONFIG_DIR = BASE_DATA_DIR / "config"
CACHE_DIR = BASE_DATA_DIR / "cache"
LOGS_DIR = BASE_DATA_DIR / "logs"


def ensure_base_dirs() -> None:
    """Ensure base config/cache/log directories exist without importing side effects."""
    BASE_DATA_DIR.mkdir(parents=True, exist_ok=True)
    for path in (CONFIG_DIR, CACHE_DIR, LOGS_DIR):
        path.mkdir(parents=True, exist_ok=True)


CONFIG_FILE = CONFIG_DIR / "config.json"
# Browser localStorage equivalent; holds nothing but the session token
SESSION_STORE_FILE = CACHE_DIR / "session_store.json"
TOKEN_KEY = "jwt"

HOME_ROUTE = "/"
SIGN_IN_ROUTE = "/signin"
SIGN_UP_ROUTE = "/signup"
PUBLIC_ROUTES = frozenset({SIGN_IN_ROUTE, SIGN_UP_ROUTE})

DEFAULT_API_BASE_URL = "https://mesto.nomoreparties.co/v1/cohort-42"
DEFAULT_AUTH_BASE_URL = "https://auth.nomoreparties.co"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_IMPERSONATE = "chrome"

__all__ = [
    "APP_NAME",
    "BASE_DATA_DIR",
    "CONFIG_DIR",
    "CACHE_DIR",
    "LOGS_DIR",
    "CONFIG_FILE",
    "SESSION_STORE_FILE",
    "TOKEN_KEY",
    "HOME_ROUTE",
    "SIGN_IN_ROUTE",
    "SIGN_UP_ROUTE",
    "PUBLIC_ROUTES",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_AUTH_BASE_URL",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_IMPERSONATE",
    "ensure_base_dirs",
]
