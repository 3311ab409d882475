"""
Repositories package - Data access layer.

This package contains repository classes that handle all data persistence
and retrieval operations, isolating the controllers from storage details.
"""

from repositories.token_repository import (
    TokenRepository,
    get_token_repository,
    reset_token_repository,
)

__all__ = [
    "TokenRepository",
    "get_token_repository",
    "reset_token_repository",
]
