"""Navigation history: the current route, guarded on every push."""

from __future__ import annotations

import threading
from collections.abc import Callable

from loguru import logger

from controllers.route_guard import RouteGuard
from utils.constants import SIGN_IN_ROUTE
from utils.entities import Session
from utils.observable import Observable


class NavigationHistory(Observable[str]):
    def __init__(
        self,
        session_provider: Callable[[], Session],
        guard: RouteGuard | None = None,
        initial_route: str = SIGN_IN_ROUTE,
    ) -> None:
        super().__init__()
        self._session_provider = session_provider
        self.guard = guard or RouteGuard()
        self._current = initial_route
        self._lock = threading.Lock()

    @property
    def current(self) -> str:
        return self._current

    def push(self, route: str) -> str:
        """Navigate to ``route`` (or to the guard's redirect) and return the route entered."""
        decision = self.guard.can_enter(route, self._session_provider())
        target = route if decision.allowed else decision.redirect_to or self.guard.sign_in_route
        if not decision.allowed:
            logger.info(f"Navigation to {route} refused; redirecting to {target}")

        with self._lock:
            self._current = target
        self._notify(target)
        return target


__all__ = ["NavigationHistory"]
