from __future__ import annotations

import pytest

from controllers.navigation import NavigationHistory
from controllers.route_guard import RouteDecision, RouteGuard
from utils.entities import Session

SIGNED_IN = Session(token="t", email="user@example.com", is_logged_in=True)
SIGNED_OUT = Session()


def test_home_requires_login():
    guard = RouteGuard()

    assert guard.can_enter("/", SIGNED_OUT) == RouteDecision(allowed=False, redirect_to="/signin")
    assert guard.can_enter("/", SIGNED_IN) == RouteDecision(allowed=True)


@pytest.mark.parametrize("route", ["/signin", "/signup"])
@pytest.mark.parametrize("session", [SIGNED_IN, SIGNED_OUT])
def test_auth_routes_always_reachable(route, session):
    assert RouteGuard().can_enter(route, session).allowed


def test_unknown_routes_are_protected():
    assert RouteGuard().can_enter("/settings", SIGNED_OUT).redirect_to == "/signin"


def test_navigation_reevaluates_on_every_push():
    session = {"value": SIGNED_IN}
    history = NavigationHistory(lambda: session["value"])

    assert history.push("/") == "/"

    session["value"] = SIGNED_OUT
    # the rendered route is not evicted on its own
    assert history.current == "/"

    assert history.push("/") == "/signin"
    assert history.current == "/signin"


def test_navigation_notifies_entered_route():
    history = NavigationHistory(lambda: SIGNED_OUT)
    seen: list[str] = []
    history.subscribe(seen.append)

    history.push("/signup")
    history.push("/")

    assert seen == ["/signup", "/signin"]
