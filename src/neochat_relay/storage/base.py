"""Key-value store interface consumed by the relay services."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Durable, eventually-consistent key-value store with per-key TTL.

    Implementations raise ``StorageError`` for backend failures. Reading or
    deleting an absent key is never an error.
    """

    @abstractmethod
    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store ``value`` under ``key``, expiring after ``ttl`` seconds if given."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    @abstractmethod
    def list(self, prefix: str, limit: int) -> list[str]:
        """Return at most ``limit`` key names starting with ``prefix``."""

    def close(self) -> None:  # noqa: B027 - optional hook
        """Release backend resources."""
