"""Redis-backed key-value store."""

from __future__ import annotations

import logging
import re
from typing import Any

import redis

from neochat_relay.core.errors import StorageError

from .base import KeyValueStore

logger = logging.getLogger(__name__)

_GLOB_SPECIALS = re.compile(r"([*?\[\]\\])")


def _escape_glob(value: str) -> str:
    return _GLOB_SPECIALS.sub(r"\\\1", value)


class RedisKeyValueStore(KeyValueStore):
    """Store values in Redis, using native key expiry for TTLs.

    ``namespace`` is prepended to every key so one Redis database can be
    shared with other services; returned key names have it stripped.
    """

    def __init__(self, client: Any, namespace: str = "") -> None:
        self._redis = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str, namespace: str = "") -> RedisKeyValueStore:
        """Create a store connected to ``url``."""
        client = redis.from_url(url, decode_responses=True)  # type: ignore[no-untyped-call]
        return cls(client, namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        try:
            self._redis.set(self._key(key), value, ex=ttl)
        except redis.RedisError as exc:
            raise StorageError(f"Storage write failed: {exc}") from exc

    def get(self, key: str) -> str | None:
        try:
            value = self._redis.get(self._key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Storage read failed: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Storage delete failed: {exc}") from exc

    def list(self, prefix: str, limit: int) -> list[str]:
        pattern = f"{_escape_glob(self._key(prefix))}*"
        strip = len(self._namespace)
        names: list[str] = []
        seen: set[str] = set()
        try:
            # SCAN may return a key more than once while the keyspace is rehashed.
            for raw in self._redis.scan_iter(match=pattern, count=limit):
                name = raw.decode("utf-8") if isinstance(raw, bytes) else raw
                if name in seen:
                    continue
                seen.add(name)
                names.append(name[strip:])
                if len(names) >= limit:
                    break
        except redis.RedisError as exc:
            raise StorageError(f"Storage list failed: {exc}") from exc
        return names

    def close(self) -> None:
        try:
            self._redis.close()
        except redis.RedisError as exc:  # pragma: no cover - shutdown path
            logger.warning("Error closing Redis connection: %s", exc)
