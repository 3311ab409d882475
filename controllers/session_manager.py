from __future__ import annotations

import threading
from collections.abc import Callable

from loguru import logger

from clients.auth_api import AuthApi, RegisterAck
from clients.http_client import AuthError
from controllers.overlay_coordinator import OverlayCoordinator
from repositories.token_repository import TokenRepository
from utils.constants import HOME_ROUTE, SIGN_IN_ROUTE
from utils.entities import AuthStatus, Session
from utils.observable import Observable
from utils.result import Result

Navigate = Callable[[str], object]


class SessionManager(Observable[Session]):
    """Owns the session token and the login state derived from it.

    A session only becomes logged in after the Auth API confirms it, either by
    validating the persisted token or by a successful sign-in. Any failure
    leaves the session logged out.
    """

    def __init__(
        self,
        auth_api: AuthApi,
        token_repo: TokenRepository,
        overlay: OverlayCoordinator,
        navigate: Navigate | None = None,
    ) -> None:
        super().__init__()
        self.auth_api = auth_api
        self.token_repo = token_repo
        self.overlay = overlay
        self._navigate = navigate or (lambda _route: None)
        self._session = Session()
        self._lock = threading.Lock()

    def bind_navigator(self, navigate: Navigate) -> None:
        self._navigate = navigate

    # ------------------------------------------------------------------ state ------------------------------------------------------------------
    @property
    def session(self) -> Session:
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self._session.is_logged_in

    def token(self) -> str | None:
        """Token to authorize a request with, read at call time."""
        return self._session.token or self.token_repo.get_token()

    def _set_session(self, session: Session) -> None:
        with self._lock:
            self._session = session
        self._notify(session)

    # ------------------------------------------------------------------ flows ------------------------------------------------------------------
    def bootstrap(self) -> Result[Session, AuthError]:
        """Restore the session from the persisted token, if the Auth API still accepts it."""
        token = self.token_repo.get_token()
        if not token:
            logger.debug("No persisted token; staying signed out")
            return Result.failure(AuthError("No persisted token"))

        try:
            email = self.auth_api.validate_token(token)
        except AuthError as exc:
            logger.warning(f"Stored token rejected, discarding it: {exc}")
            # A sign-in may have replaced the token while it was being validated
            if not self.token_repo.discard_token(token):
                logger.debug("Stored token changed during validation; keeping the new one")
            return Result.failure(exc)

        session = Session(token=token, email=email, is_logged_in=True)
        self._set_session(session)
        logger.info(f"Session restored for {email}")
        self._navigate(HOME_ROUTE)
        return Result.success(session)

    def register(self, email: str, password: str) -> Result[RegisterAck, AuthError]:
        try:
            ack = self.auth_api.register(email, password)
        except AuthError as exc:
            logger.warning(f"Registration failed for {email}: {exc}")
            self.overlay.open_auth_result(AuthStatus.FAIL)
            return Result.failure(exc)

        logger.info(f"Registered {ack.email}")
        self.overlay.open_auth_result(AuthStatus.SUCCESS)
        self._navigate(SIGN_IN_ROUTE)
        return Result.success(ack)

    def login(self, email: str, password: str) -> Result[Session, AuthError]:
        try:
            token = self.auth_api.login(email, password)
        except AuthError as exc:
            logger.warning(f"Sign-in failed for {email}: {exc}")
            self.overlay.open_auth_result(AuthStatus.FAIL)
            return Result.failure(exc)

        self.token_repo.save_token(token)
        session = Session(token=token, email=email, is_logged_in=True)
        self._set_session(session)
        logger.info(f"Signed in as {email}")
        self._navigate(HOME_ROUTE)
        return Result.success(session)

    def sign_out(self) -> Session:
        """Forget the token and log out. Never touches the network."""
        self.token_repo.clear_token()
        session = Session()
        self._set_session(session)
        logger.info("Signed out")
        self._navigate(SIGN_IN_ROUTE)
        return session


__all__ = ["SessionManager"]
