"""Key-value storage backends for the relay."""

from __future__ import annotations

import logging

from neochat_relay.core.settings import Settings

from .base import KeyValueStore
from .memory import InMemoryKeyValueStore
from .redis_store import RedisKeyValueStore

logger = logging.getLogger(__name__)

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "build_store",
]


def build_store(config: Settings) -> KeyValueStore:
    """Build the store selected by ``RELAY_STORAGE_BACKEND``."""
    if config.storage_backend == "redis":
        logger.info("Using Redis storage backend")
        return RedisKeyValueStore.from_url(config.redis_url, namespace=config.key_prefix)
    logger.info("Using in-memory storage backend; data will not survive restarts")
    return InMemoryKeyValueStore()
