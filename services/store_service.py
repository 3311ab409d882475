"""Persistent key/value store backed by a small JSON file."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

from loguru import logger

from utils.constants import SESSION_STORE_FILE


class StoreService:
    """String key/value store that survives restarts, like the browser's localStorage."""

    def __init__(self, path: Path = SESSION_STORE_FILE) -> None:
        self.path = path
        self._lock = threading.Lock()

    def _load_store(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON at {self.path}; ignoring store")
            return {}
        except OSError as exc:
            logger.warning(f"Failed to read {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save_store(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.warning(f"Failed to write {self.path}: {exc}")

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key (or the file) is absent."""
        with self._lock:
            value = self._load_store().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load_store()
            data[key] = value
            self._save_store(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load_store()
            if key not in data:
                return
            del data[key]
            self._save_store(data)

    def remove_if(self, key: str, expected: str) -> bool:
        """Remove ``key`` only while it still holds ``expected``; report whether it did."""
        with self._lock:
            data = self._load_store()
            if data.get(key) != expected:
                return False
            del data[key]
            self._save_store(data)
        return True


_default_store_service: StoreService | None = None


def get_store_service() -> StoreService:
    """Return a shared StoreService instance."""
    global _default_store_service
    if _default_store_service is None:
        _default_store_service = StoreService()
    return _default_store_service


def reset_store_service() -> None:
    """Drop the shared instance; used by tests for isolation."""
    global _default_store_service
    _default_store_service = None


__all__ = ["StoreService", "get_store_service", "reset_store_service"]
