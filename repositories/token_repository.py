"""
Token Repository - persistence of the session token.

Only the Session Manager writes through this repository; the token lives
under the single fixed key ``jwt`` of the persistent store.
"""

from __future__ import annotations

from services.store_service import StoreService, get_store_service
from utils.constants import TOKEN_KEY


class TokenRepository:
    def __init__(self, store: StoreService | None = None, key: str = TOKEN_KEY) -> None:
        self.store = store or get_store_service()
        self.key = key

    def get_token(self) -> str | None:
        token = self.store.get(self.key)
        return token or None

    def save_token(self, token: str) -> None:
        self.store.set(self.key, token)

    def clear_token(self) -> None:
        self.store.remove(self.key)

    def discard_token(self, token: str) -> bool:
        """Clear the stored token only if it is still ``token``."""
        return self.store.remove_if(self.key, token)


_default_repository: TokenRepository | None = None


def get_token_repository() -> TokenRepository:
    global _default_repository
    if _default_repository is None:
        _default_repository = TokenRepository()
    return _default_repository


def reset_token_repository() -> None:
    global _default_repository
    _default_repository = None


__all__ = ["TokenRepository", "get_token_repository", "reset_token_repository"]
