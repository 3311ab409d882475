"""
Application Controller - composition root for the photo cards client.

Wires the session manager, entity store, overlay coordinator and navigation
together, starts the two independent startup tasks, and turns user actions
into background API calls whose outcomes drive the overlay and the session.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from clients.auth_api import AuthApi
from clients.cards_api import CardsApi
from controllers.navigation import NavigationHistory
from controllers.overlay_coordinator import OverlayCoordinator
from controllers.route_guard import RouteGuard
from controllers.session_manager import SessionManager
from repositories.token_repository import TokenRepository, get_token_repository
from services.entity_store import EntityStore
from utils.background_worker import BackgroundWorker, CallAfter
from utils.entities import Card, OverlayKind, OverlayState, Session, UserProfile
from utils.result import Result
from utils.service_config import ServiceConfig, load_service_config

ResultCallback = Callable[[Result], None]


class AppController:

    def __init__(
        self,
        *,
        auth_api: AuthApi,
        cards_api: CardsApi,
        token_repo: TokenRepository,
        worker: BackgroundWorker | None = None,
        overlay: OverlayCoordinator | None = None,
        guard: RouteGuard | None = None,
    ) -> None:
        self.worker = worker or BackgroundWorker()
        self.overlay = overlay or OverlayCoordinator()
        self.session_manager = SessionManager(auth_api, token_repo, self.overlay)
        self.navigation = NavigationHistory(lambda: self.session_manager.session, guard)
        self.session_manager.bind_navigator(self.navigation.push)
        # Card requests read the token per call, so the initial load never depends on bootstrap order
        cards_api.bind_token_provider(self.session_manager.token)
        self.entity_store = EntityStore(cards_api)
        self._started = False

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig | None = None,
        *,
        token_repo: TokenRepository | None = None,
        call_after: CallAfter | None = None,
    ) -> AppController:
        """Build a controller talking to the configured services."""
        config = config or load_service_config()
        token_repo = token_repo or get_token_repository()
        return cls(
            auth_api=AuthApi.from_config(config),
            cards_api=CardsApi.from_config(config),
            token_repo=token_repo,
            worker=BackgroundWorker(call_after=call_after),
        )

    # ============= Read-only state for the shell =============

    @property
    def session(self) -> Session:
        return self.session_manager.session

    @property
    def profile(self) -> UserProfile:
        return self.entity_store.profile

    @property
    def cards(self) -> tuple[Card, ...]:
        return self.entity_store.cards

    @property
    def overlay_state(self) -> OverlayState:
        return self.overlay.state

    @property
    def current_route(self) -> str:
        return self.navigation.current

    # ============= Startup =============

    def start(self) -> None:
        """Kick off session bootstrap and the initial data load.

        The two tasks are independent and may finish in either order; the data
        load does not wait for the session to be validated.
        """
        if self._started:
            logger.debug("Controller already started")
            return
        self._started = True
        self._submit(self.session_manager.bootstrap)
        self._submit(self.entity_store.load_initial)

    def shutdown(self, timeout: float = 10.0) -> None:
        self.worker.shutdown(timeout=timeout)

    def _submit(
        self,
        func: Callable[..., Result],
        *args: Any,
        on_result: ResultCallback | None = None,
    ) -> None:
        def error_handler(error: Exception) -> None:
            logger.error(f"{func.__name__} raised unexpectedly: {error}")

        self.worker.submit(func, *args, on_success=on_result, on_error=error_handler)

    def _close_on_success(self, result: Result) -> None:
        if result.is_success:
            self.overlay.close_all()

    # ============= Overlay entry points =============

    def handle_edit_profile_click(self) -> None:
        self.overlay.open_edit_profile()

    def handle_add_place_click(self) -> None:
        self.overlay.open_add_place()

    def handle_edit_avatar_click(self) -> None:
        self.overlay.open_edit_avatar()

    def handle_card_click(self, card: Card) -> None:
        self.overlay.open_view_image(card)

    def handle_card_delete_click(self, card: Card) -> None:
        if not self.entity_store.can_remove(card):
            logger.debug(f"Card {card.id} is not owned by the current user; ignoring")
            return
        self.overlay.open_confirm_remove(card)

    def close_all_popups(self) -> None:
        self.overlay.close_all()

    # ============= Profile and card mutations =============

    def handle_update_user(self, fields: Mapping[str, str]) -> None:
        self._submit(self.entity_store.update_profile, dict(fields), on_result=self._close_on_success)

    def handle_update_avatar(self, url: str) -> None:
        self._submit(self.entity_store.update_avatar, url, on_result=self._close_on_success)

    def handle_add_place_submit(self, data: Mapping[str, str]) -> None:
        self._submit(self.entity_store.add_card, dict(data), on_result=self._close_on_success)

    def handle_card_like(self, card: Card) -> None:
        self._submit(self.entity_store.toggle_like, card)

    def handle_card_delete(self, card: Card) -> None:
        self._submit(self.entity_store.remove_card, card)

    def handle_confirm_remove(self) -> None:
        """Remove the card captured by the open confirm dialog; the dialog closes on success."""
        state = self.overlay.state
        if state.kind is not OverlayKind.CONFIRM_REMOVE or state.card is None:
            logger.debug("No removal awaiting confirmation")
            return
        self._submit(self.entity_store.remove_card, state.card, on_result=self._close_on_success)

    # ============= Auth =============

    def on_register(self, email: str, password: str) -> None:
        self._submit(self.session_manager.register, email, password)

    def on_login(self, email: str, password: str) -> None:
        self._submit(self.session_manager.login, email, password)

    def on_sign_out(self) -> None:
        self.session_manager.sign_out()

    def navigate(self, route: str) -> str:
        return self.navigation.push(route)


# Singleton instance
_controller_instance: AppController | None = None


def get_app_controller() -> AppController:
    global _controller_instance
    if _controller_instance is None:
        _controller_instance = AppController.from_config()
    return _controller_instance


def reset_app_controller() -> None:
    global _controller_instance
    if _controller_instance is not None:
        _controller_instance.shutdown(timeout=1.0)
    _controller_instance = None


__all__ = ["AppController", "get_app_controller", "reset_app_controller"]
