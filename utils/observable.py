from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

__all__ = ["Observable"]

T = TypeVar("T")


class Observable(Generic[T]):
    """Listener registry shared by the session, entity and overlay state holders.

    Listeners are called with the new snapshot after every change. A failing
    listener is logged and does not stop the others from being notified.
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[T], None]] = []
        self._listeners_lock = threading.Lock()

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it again."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: T) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as exc:
                logger.exception(f"State listener {listener!r} failed: {exc}")
