"""Result type for operations that may succeed or fail."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Outcome of a network-backed operation.

    Store and session operations never raise on remote failures; they return
    ``Result.failure(error)`` after logging, so callers branch on ``is_success``.
    """

    value: T | None = None
    error: E | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, value: T) -> Result[T, E]:
        return cls(value=value, error=None)

    @classmethod
    def failure(cls, error: E) -> Result[T, E]:
        if error is None:
            raise ValueError("A failed result needs an error")
        return cls(value=None, error=error)


__all__ = ["Result"]
