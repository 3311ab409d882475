"""
Entity Store - local mirror of the current user's profile and the card collection.

Writes are confirm-then-apply: local state only changes after the API returns
the updated entity, and the server's copy replaces the local one wholesale.
Failures are logged and returned as ``Result.failure``; nothing needs to be
rolled back because nothing was applied.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor

from loguru import logger

from clients.cards_api import CardsApi
from clients.http_client import ApiError
from utils.entities import Card, EntitySnapshot, UserProfile
from utils.observable import Observable
from utils.result import Result


class EntityStore(Observable[EntitySnapshot]):
    """Owns ``profile`` and ``cards``; the only writer is a successful API response."""

    def __init__(self, api: CardsApi) -> None:
        super().__init__()
        self.api = api
        self._profile = UserProfile()
        self._cards: tuple[Card, ...] = ()
        self._lock = threading.RLock()

    # ============= Read access =============

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def cards(self) -> tuple[Card, ...]:
        return self._cards

    def snapshot(self) -> EntitySnapshot:
        with self._lock:
            return EntitySnapshot(profile=self._profile, cards=self._cards)

    def get_card(self, card_id: str) -> Card | None:
        return next((card for card in self._cards if card.id == card_id), None)

    def is_liked(self, card: Card) -> bool:
        return card.is_liked_by(self._profile.id)

    def can_remove(self, card: Card) -> bool:
        """Only the owner of a card may ask for it to be removed."""
        return card.is_owned_by(self._profile.id)

    def _apply(
        self,
        *,
        profile: UserProfile | None = None,
        cards: tuple[Card, ...] | None = None,
        update_cards: Callable[[tuple[Card, ...]], tuple[Card, ...]] | None = None,
    ) -> EntitySnapshot:
        """Swap in new state under the lock, then notify with the lock released."""
        with self._lock:
            if profile is not None:
                self._profile = profile
            if cards is not None:
                self._cards = cards
            if update_cards is not None:
                self._cards = update_cards(self._cards)
            snapshot = EntitySnapshot(profile=self._profile, cards=self._cards)
        self._notify(snapshot)
        return snapshot

    # ============= Initial load =============

    def load_initial(self) -> Result[EntitySnapshot, ApiError]:
        """Fetch profile and cards together; apply both or neither."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="initial-load") as executor:
            profile_future = executor.submit(self.api.get_profile)
            cards_future = executor.submit(self.api.list_cards)
            try:
                profile = profile_future.result()
                cards = cards_future.result()
            except ApiError as exc:
                logger.error(f"Initial load failed; keeping empty state: {exc}")
                return Result.failure(exc)

        snapshot = self._apply(profile=profile, cards=tuple(cards))
        logger.info(f"Loaded profile {profile.id} and {len(cards)} cards")
        return Result.success(snapshot)

    # ============= Profile =============

    def update_profile(self, fields: Mapping[str, str]) -> Result[UserProfile, ApiError]:
        try:
            profile = self.api.set_profile(fields)
        except ApiError as exc:
            logger.warning(f"Profile update failed: {exc}")
            return Result.failure(exc)
        self._apply(profile=profile)
        return Result.success(profile)

    def update_avatar(self, url: str) -> Result[UserProfile, ApiError]:
        try:
            profile = self.api.set_avatar(url)
        except ApiError as exc:
            logger.warning(f"Avatar update failed: {exc}")
            return Result.failure(exc)
        self._apply(profile=profile)
        return Result.success(profile)

    # ============= Cards =============

    def toggle_like(self, card: Card) -> Result[Card, ApiError]:
        """Ask the server to flip the current user's like; show whatever it answers."""
        liked = not self.is_liked(card)
        try:
            updated = self.api.set_like(card.id, liked)
        except ApiError as exc:
            logger.warning(f"Could not {'like' if liked else 'unlike'} card {card.id}: {exc}")
            return Result.failure(exc)

        self._apply(update_cards=lambda cards: tuple(updated if c.id == card.id else c for c in cards))
        return Result.success(updated)

    def add_card(self, data: Mapping[str, str]) -> Result[Card, ApiError]:
        try:
            created = self.api.add_card(data)
        except ApiError as exc:
            logger.warning(f"Adding card '{data.get('name', '')}' failed: {exc}")
            return Result.failure(exc)

        self._apply(update_cards=lambda cards: (created, *cards))
        logger.info(f"Added card {created.id}")
        return Result.success(created)

    def remove_card(self, card: Card) -> Result[Card, ApiError]:
        try:
            self.api.remove_card(card.id)
        except ApiError as exc:
            logger.warning(f"Removing card {card.id} failed: {exc}")
            return Result.failure(exc)

        self._apply(update_cards=lambda cards: tuple(c for c in cards if c.id != card.id))
        logger.info(f"Removed card {card.id}")
        return Result.success(card)


__all__ = ["EntityStore"]
