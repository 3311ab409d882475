from __future__ import annotations

from dataclasses import dataclass

from utils.constants import PUBLIC_ROUTES, SIGN_IN_ROUTE
from utils.entities import Session


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: str | None = None


class RouteGuard:
    """Decides whether a route may be entered for a given session.

    Sign-in and sign-up are public; everything else, home included, needs a
    logged-in session. A refused navigation is redirected to sign-in and the
    attempted target is not remembered.
    """

    def __init__(
        self,
        public_routes: frozenset[str] = PUBLIC_ROUTES,
        sign_in_route: str = SIGN_IN_ROUTE,
    ) -> None:
        self.public_routes = public_routes
        self.sign_in_route = sign_in_route

    def can_enter(self, route: str, session: Session) -> RouteDecision:
        if route in self.public_routes or session.is_logged_in:
            return RouteDecision(allowed=True)
        return RouteDecision(allowed=False, redirect_to=self.sign_in_route)


__all__ = ["RouteDecision", "RouteGuard"]
