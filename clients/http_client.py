"""Thin JSON-over-HTTP transport built on curl_cffi."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from curl_cffi import requests
from curl_cffi.requests.exceptions import RequestException
from loguru import logger

from utils.constants import DEFAULT_IMPERSONATE, DEFAULT_REQUEST_TIMEOUT


class ClientError(RuntimeError):
    """Base class for failures talking to the remote services."""


class ApiError(ClientError):
    """Raised when a profile or card request fails (network, server or payload)."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class AuthError(ApiError):
    """Raised for rejected credentials and invalid or expired tokens."""


def _error_message(response: Any) -> str:
    try:
        payload = response.json()
    except Exception:
        payload = None
    if isinstance(payload, Mapping):
        for key in ("message", "error"):
            value = payload.get(key)
            if value:
                return str(value)
    return f"Request failed with status {response.status_code}"


class HttpClient:
    """Issues JSON requests against one base URL.

    ``headers_provider`` is called for every request so authorization headers
    reflect the token at call time rather than at construction time.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        impersonate: str = DEFAULT_IMPERSONATE,
        headers_provider: Callable[[], Mapping[str, str]] | None = None,
        error_type: type[ApiError] = ApiError,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.impersonate = impersonate
        self.headers_provider = headers_provider
        self._error_type = error_type

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (``None`` for empty bodies)."""
        merged: dict[str, str] = {"Content-Type": "application/json"}
        if self.headers_provider is not None:
            merged.update(self.headers_provider())
        if headers:
            merged.update(headers)

        url = self._url(path)
        logger.debug(f"{method} {url}")
        try:
            response = requests.request(
                method,
                url,
                json=json,
                headers=merged,
                timeout=self.timeout,
                impersonate=self.impersonate,
            )
        except RequestException as exc:
            raise self._error_type(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise self._error_type(_error_message(response), status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise self._error_type(f"{method} {url} returned invalid JSON") from exc

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)


__all__ = ["ApiError", "AuthError", "ClientError", "HttpClient"]
