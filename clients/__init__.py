"""
Clients package - HTTP access to the Auth and User/Card APIs.

Clients raise ``ApiError``/``AuthError``; the stores above them turn those into
``Result`` values and log them.
"""

from clients.auth_api import AuthApi
from clients.cards_api import CardsApi
from clients.http_client import ApiError, AuthError, ClientError, HttpClient

__all__ = [
    "ApiError",
    "AuthApi",
    "AuthError",
    "CardsApi",
    "ClientError",
    "HttpClient",
]
