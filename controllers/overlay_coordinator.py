"""Single-overlay state machine: at most one popup or tooltip is visible at a time."""

from __future__ import annotations

import threading

from loguru import logger

from utils.entities import CARD_OVERLAYS, AuthStatus, Card, OverlayKind, OverlayState
from utils.observable import Observable

_CLOSED = OverlayState()


class OverlayCoordinator(Observable[OverlayState]):
    """Owns which overlay is active.

    ``open`` always replaces whatever is showing (last writer wins, no stack),
    ``close_all`` always returns to the closed state. Card overlays keep the
    card snapshot they were opened with, so the overlay can still render if
    the card leaves the collection while it is open.
    """

    def __init__(self) -> None:
        super().__init__()
        self._state = _CLOSED
        self._state_lock = threading.Lock()

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def selected_card(self) -> Card | None:
        return self._state.card

    def is_open(self, kind: OverlayKind | None = None) -> bool:
        state = self._state
        if kind is None:
            return state.is_open
        return state.kind is kind

    def open(
        self,
        kind: OverlayKind,
        *,
        card: Card | None = None,
        status: AuthStatus | None = None,
    ) -> OverlayState:
        kind = OverlayKind(kind)
        if kind is OverlayKind.NONE:
            self.close_all()
            return self._state
        if kind in CARD_OVERLAYS and card is None:
            raise ValueError(f"Overlay '{kind.value}' needs a card")
        if kind is OverlayKind.AUTH_RESULT:
            if status is None:
                raise ValueError("Auth result overlay needs a status")
            status = AuthStatus(status)

        new_state = OverlayState(
            kind=kind,
            card=card if kind in CARD_OVERLAYS else None,
            status=status if kind is OverlayKind.AUTH_RESULT else None,
        )
        self._replace(new_state)
        return new_state

    def open_edit_profile(self) -> OverlayState:
        return self.open(OverlayKind.EDIT_PROFILE)

    def open_add_place(self) -> OverlayState:
        return self.open(OverlayKind.ADD_PLACE)

    def open_edit_avatar(self) -> OverlayState:
        return self.open(OverlayKind.EDIT_AVATAR)

    def open_confirm_remove(self, card: Card) -> OverlayState:
        return self.open(OverlayKind.CONFIRM_REMOVE, card=card)

    def open_view_image(self, card: Card) -> OverlayState:
        return self.open(OverlayKind.VIEW_IMAGE, card=card)

    def open_auth_result(self, status: AuthStatus) -> OverlayState:
        return self.open(OverlayKind.AUTH_RESULT, status=status)

    def close_all(self) -> None:
        self._replace(_CLOSED)

    def _replace(self, new_state: OverlayState) -> None:
        with self._state_lock:
            previous = self._state
            self._state = new_state
        if previous == new_state:
            return
        logger.debug(f"Overlay {previous.kind.value} -> {new_state.kind.value}")
        self._notify(new_state)


__all__ = ["OverlayCoordinator"]
