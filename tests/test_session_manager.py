from __future__ import annotations

import pytest
from test_helpers import FakeAuthApi

from clients.http_client import AuthError
from controllers.overlay_coordinator import OverlayCoordinator
from controllers.session_manager import SessionManager
from repositories.token_repository import TokenRepository
from services.store_service import StoreService
from utils.entities import AuthStatus, OverlayKind, Session


@pytest.fixture
def auth_api() -> FakeAuthApi:
    api = FakeAuthApi()
    api.accounts["user@example.com"] = "s3cret"
    return api


@pytest.fixture
def token_repo(tmp_path) -> TokenRepository:
    return TokenRepository(StoreService(tmp_path / "store.json"))


@pytest.fixture
def overlay() -> OverlayCoordinator:
    return OverlayCoordinator()


@pytest.fixture
def routes() -> list[str]:
    return []


@pytest.fixture
def manager(auth_api, token_repo, overlay, routes) -> SessionManager:
    return SessionManager(auth_api, token_repo, overlay, navigate=routes.append)


def test_bootstrap_without_token_never_validates(manager, auth_api, routes):
    result = manager.bootstrap()

    assert result.is_error
    assert manager.session == Session()
    assert not manager.is_logged_in
    assert auth_api.calls == []
    assert routes == []


def test_bootstrap_with_valid_token_logs_in_and_goes_home(manager, auth_api, token_repo, routes):
    auth_api.valid_tokens["tok"] = "user@example.com"
    token_repo.save_token("tok")

    result = manager.bootstrap()

    assert result.is_success
    assert manager.session == Session(token="tok", email="user@example.com", is_logged_in=True)
    assert routes == ["/"]


def test_bootstrap_with_rejected_token_clears_it(manager, auth_api, token_repo, overlay, routes):
    token_repo.save_token("expired")

    result = manager.bootstrap()

    assert isinstance(result.error, AuthError)
    assert token_repo.get_token() is None
    assert not manager.is_logged_in
    assert not overlay.is_open()
    assert routes == []

    auth_api.calls.clear()
    again = manager.bootstrap()
    assert again.is_error
    assert auth_api.calls == []
    assert not manager.is_logged_in


def test_rejected_token_does_not_erase_login_made_during_validation(manager, auth_api, token_repo):
    token_repo.save_token("stale")

    def validate_after_login(token):
        manager.login("user@example.com", "s3cret")
        raise AuthError("Token is invalid", status=401)

    auth_api.validate_token = validate_after_login

    result = manager.bootstrap()

    assert result.is_error
    assert manager.is_logged_in
    assert token_repo.get_token() == "token-user@example.com"


def test_login_persists_token_and_navigates_home(manager, token_repo, routes):
    result = manager.login("user@example.com", "s3cret")

    assert result.is_success
    assert token_repo.get_token() == "token-user@example.com"
    assert manager.session.email == "user@example.com"
    assert manager.is_logged_in
    assert routes == ["/"]


def test_login_failure_shows_fail_tooltip(manager, token_repo, overlay, routes):
    result = manager.login("user@example.com", "wrong")

    assert result.is_error
    assert overlay.state.kind is OverlayKind.AUTH_RESULT
    assert overlay.state.status is AuthStatus.FAIL
    assert token_repo.get_token() is None
    assert not manager.is_logged_in
    assert routes == []


def test_register_success_shows_tooltip_and_goes_to_sign_in(manager, overlay, routes):
    result = manager.register("new@example.com", "pw")

    assert result.is_success
    assert result.value.email == "new@example.com"
    assert overlay.state.status is AuthStatus.SUCCESS
    assert routes == ["/signin"]
    assert not manager.is_logged_in


def test_register_failure_leaves_session_untouched(manager, auth_api, overlay, routes):
    auth_api.fail_register = True

    result = manager.register("new@example.com", "pw")

    assert result.is_error
    assert overlay.state.status is AuthStatus.FAIL
    assert manager.session == Session()
    assert routes == []


def test_sign_out_clears_token_synchronously(manager, token_repo, routes):
    manager.login("user@example.com", "s3cret")
    routes.clear()

    session = manager.sign_out()

    assert session == Session()
    assert not manager.is_logged_in
    assert token_repo.get_token() is None
    assert routes == ["/signin"]


def test_sign_out_when_already_signed_out_is_harmless(manager, token_repo):
    manager.sign_out()

    assert not manager.is_logged_in
    assert token_repo.get_token() is None


def test_token_prefers_session_then_persisted(manager, token_repo):
    assert manager.token() is None

    token_repo.save_token("persisted")
    assert manager.token() == "persisted"

    manager.login("user@example.com", "s3cret")
    assert manager.token() == "token-user@example.com"


def test_listeners_receive_each_session(manager):
    seen: list[Session] = []
    unsubscribe = manager.subscribe(seen.append)

    manager.login("user@example.com", "s3cret")
    manager.sign_out()
    unsubscribe()
    manager.login("user@example.com", "s3cret")

    assert [s.is_logged_in for s in seen] == [True, False]
