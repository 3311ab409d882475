"""Client for the User/Card API: profile, avatar, cards and likes."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from clients.http_client import ApiError, HttpClient
from utils.constants import DEFAULT_API_BASE_URL
from utils.entities import Card, PayloadError, UserProfile, cards_from_payload
from utils.service_config import ServiceConfig

TokenProvider = Callable[[], "str | None"]


class CardsApi:
    """Every call is authorized on its own with the token available at that moment."""

    def __init__(
        self,
        http: HttpClient | None = None,
        *,
        token_provider: TokenProvider | None = None,
        api_token: str = "",
    ) -> None:
        self._token_provider = token_provider
        self._api_token = api_token
        self.http = http or HttpClient(DEFAULT_API_BASE_URL)
        self.http.headers_provider = self._auth_headers

    @classmethod
    def from_config(
        cls, config: ServiceConfig, *, token_provider: TokenProvider | None = None
    ) -> CardsApi:
        http = HttpClient(
            config.api_base_url,
            timeout=config.request_timeout,
            impersonate=config.impersonate,
        )
        return cls(http, token_provider=token_provider, api_token=config.api_token)

    def bind_token_provider(self, token_provider: TokenProvider) -> None:
        self._token_provider = token_provider

    def _auth_headers(self) -> dict[str, str]:
        if self._api_token:
            return {"Authorization": self._api_token}
        token = self._token_provider() if self._token_provider else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    @staticmethod
    def _parse(factory: Callable[[Any], Any], payload: Any) -> Any:
        try:
            return factory(payload)
        except PayloadError as exc:
            raise ApiError(f"Unexpected response payload: {exc}") from exc

    # ============= Profile =============

    def get_profile(self) -> UserProfile:
        return self._parse(UserProfile.from_payload, self.http.get("/users/me"))

    def set_profile(self, fields: Mapping[str, str]) -> UserProfile:
        body = {"name": fields.get("name", ""), "about": fields.get("about", "")}
        return self._parse(UserProfile.from_payload, self.http.patch("/users/me", json=body))

    def set_avatar(self, url: str) -> UserProfile:
        payload = self.http.patch("/users/me/avatar", json={"avatar": url})
        return self._parse(UserProfile.from_payload, payload)

    # ============= Cards =============

    def list_cards(self) -> list[Card]:
        return self._parse(cards_from_payload, self.http.get("/cards"))

    def add_card(self, data: Mapping[str, str]) -> Card:
        body = {"name": data.get("name", ""), "link": data.get("link") or data.get("image_url", "")}
        return self._parse(Card.from_payload, self.http.post("/cards", json=body))

    def remove_card(self, card_id: str) -> None:
        self.http.delete(f"/cards/{card_id}")

    def set_like(self, card_id: str, liked: bool) -> Card:
        path = f"/cards/{card_id}/likes"
        payload = self.http.put(path) if liked else self.http.delete(path)
        return self._parse(Card.from_payload, payload)


__all__ = ["CardsApi"]
