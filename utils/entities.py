"""Client-side mirrors of server-owned entities and the session/overlay value types.

Entities are immutable: the stores replace them wholesale with whatever the
server returns, and any reference held elsewhere (an open overlay, a pending
like request) stays a consistent snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PayloadError(ValueError):
    """Raised when a server payload is missing fields required to build an entity."""


def _extract_id(value: Any) -> str:
    """Accept either a bare id or an embedded ``{"_id": ...}`` object."""
    if isinstance(value, Mapping):
        value = value.get("_id")
    return str(value) if value not in (None, "") else ""


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload or payload[key] is None:
        raise PayloadError(f"Missing '{key}' in payload")
    return payload[key]


@dataclass(frozen=True)
class UserProfile:
    id: str = ""
    name: str = ""
    about: str = ""
    avatar_url: str = ""

    @property
    def is_loaded(self) -> bool:
        return bool(self.id)

    @classmethod
    def from_payload(cls, payload: Any) -> UserProfile:
        if not isinstance(payload, Mapping):
            raise PayloadError(f"Expected a user object, got {type(payload).__name__}")
        return cls(
            id=_extract_id(_require(payload, "_id")),
            name=str(payload.get("name") or ""),
            about=str(payload.get("about") or ""),
            avatar_url=str(payload.get("avatar") or ""),
        )


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    image_url: str
    owner_id: str = ""
    liked_by: frozenset[str] = field(default_factory=frozenset)
    created_at: str = ""

    @property
    def like_count(self) -> int:
        return len(self.liked_by)

    def is_liked_by(self, user_id: str) -> bool:
        return bool(user_id) and user_id in self.liked_by

    def is_owned_by(self, user_id: str) -> bool:
        return bool(user_id) and user_id == self.owner_id

    @classmethod
    def from_payload(cls, payload: Any) -> Card:
        if not isinstance(payload, Mapping):
            raise PayloadError(f"Expected a card object, got {type(payload).__name__}")
        likes = payload.get("likes") or []
        if not isinstance(likes, Iterable) or isinstance(likes, (str, bytes)):
            raise PayloadError("Card 'likes' must be a list")
        return cls(
            id=_extract_id(_require(payload, "_id")),
            name=str(payload.get("name") or ""),
            image_url=str(payload.get("link") or ""),
            owner_id=_extract_id(payload.get("owner")),
            liked_by=frozenset(filter(None, (_extract_id(entry) for entry in likes))),
            created_at=str(payload.get("createdAt") or ""),
        )


def cards_from_payload(payload: Any) -> list[Card]:
    if not isinstance(payload, list):
        raise PayloadError(f"Expected a card list, got {type(payload).__name__}")
    return [Card.from_payload(entry) for entry in payload]


@dataclass(frozen=True)
class Session:
    token: str | None = None
    email: str = ""
    is_logged_in: bool = False


class OverlayKind(str, Enum):
    NONE = "none"
    EDIT_PROFILE = "edit_profile"
    ADD_PLACE = "add_place"
    EDIT_AVATAR = "edit_avatar"
    CONFIRM_REMOVE = "confirm_remove"
    VIEW_IMAGE = "view_image"
    AUTH_RESULT = "auth_result"


class AuthStatus(str, Enum):
    SUCCESS = "success"
    FAIL = "fail"


CARD_OVERLAYS = frozenset({OverlayKind.CONFIRM_REMOVE, OverlayKind.VIEW_IMAGE})


@dataclass(frozen=True)
class OverlayState:
    """The single active overlay; ``card``/``status`` are only set for the kinds that use them."""

    kind: OverlayKind = OverlayKind.NONE
    card: Card | None = None
    status: AuthStatus | None = None

    @property
    def is_open(self) -> bool:
        return self.kind is not OverlayKind.NONE


@dataclass(frozen=True)
class EntitySnapshot:
    profile: UserProfile
    cards: tuple[Card, ...]


__all__ = [
    "AuthStatus",
    "CARD_OVERLAYS",
    "Card",
    "EntitySnapshot",
    "OverlayKind",
    "OverlayState",
    "PayloadError",
    "Session",
    "UserProfile",
    "cards_from_payload",
]
