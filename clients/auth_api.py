"""Client for the Auth API: register, sign in, and validate a stored token."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from clients.http_client import AuthError, HttpClient
from utils.constants import DEFAULT_AUTH_BASE_URL
from utils.service_config import ServiceConfig


@dataclass(frozen=True)
class RegisterAck:
    user_id: str
    email: str


def _data_section(payload: Any) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        data = payload.get("data", payload)
        if isinstance(data, Mapping):
            return data
    raise AuthError("Malformed auth response")


class AuthApi:
    def __init__(self, http: HttpClient | None = None) -> None:
        self.http = http or HttpClient(DEFAULT_AUTH_BASE_URL, error_type=AuthError)

    @classmethod
    def from_config(cls, config: ServiceConfig) -> AuthApi:
        return cls(
            HttpClient(
                config.auth_base_url,
                timeout=config.request_timeout,
                impersonate=config.impersonate,
                error_type=AuthError,
            )
        )

    def register(self, email: str, password: str) -> RegisterAck:
        payload = self.http.post("/signup", json={"email": email, "password": password})
        data = _data_section(payload)
        return RegisterAck(user_id=str(data.get("_id") or ""), email=str(data.get("email") or email))

    def login(self, email: str, password: str) -> str:
        """Exchange credentials for a session token."""
        payload = self.http.post("/signin", json={"email": email, "password": password})
        token = payload.get("token") if isinstance(payload, Mapping) else None
        if not token:
            raise AuthError("Sign-in response did not include a token")
        return str(token)

    def validate_token(self, token: str) -> str:
        """Return the e-mail the token belongs to; raises ``AuthError`` when rejected."""
        payload = self.http.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        email = _data_section(payload).get("email")
        if not email:
            raise AuthError("Token validation response did not include an e-mail")
        return str(email)


__all__ = ["AuthApi", "RegisterAck"]
