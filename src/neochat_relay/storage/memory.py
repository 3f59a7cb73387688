"""In-process key-value store with lazy TTL expiry."""

from __future__ import annotations

import time
from collections.abc import Callable
from threading import Lock

from .base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dictionary store.

    Suitable for tests and single-process development only: contents are
    lost on restart and not shared between workers. Expired keys are purged
    when they are next touched.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}
        self._lock = Lock()

    def _alive(self, key: str, now: float) -> bool:
        entry = self._data.get(key)
        if entry is None:
            return False
        expires_at = entry[1]
        if expires_at is not None and expires_at <= now:
            del self._data[key]
            return False
        return True

    def put(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def get(self, key: str) -> str | None:
        with self._lock:
            if not self._alive(key, self._clock()):
                return None
            return self._data[key][0]

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def list(self, prefix: str, limit: int) -> list[str]:
        now = self._clock()
        names: list[str] = []
        with self._lock:
            for key in sorted(self._data):
                if len(names) >= limit:
                    break
                if key.startswith(prefix) and self._alive(key, now):
                    names.append(key)
        return names

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for key in list(self._data) if self._alive(key, now))
