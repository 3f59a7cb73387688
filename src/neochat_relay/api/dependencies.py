"""FastAPI dependency providers for the relay endpoints."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from neochat_relay.core.settings import Settings, settings
from neochat_relay.services import MailboxStore, ProfileDirectory
from neochat_relay.storage import KeyValueStore, build_store


def get_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return getattr(request.app.state, "settings", settings)


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    """Return the shared key-value store handle for this process."""
    return build_store(settings)


SettingsDep = Annotated[Settings, Depends(get_settings)]
StoreDep = Annotated[KeyValueStore, Depends(get_store)]


def get_profile_directory(store: StoreDep) -> ProfileDirectory:
    return ProfileDirectory(store)


def get_mailbox_store(store: StoreDep, config: SettingsDep) -> MailboxStore:
    return MailboxStore(
        store,
        ttl_seconds=config.message_ttl_seconds,
        poll_limit=config.poll_limit,
        min_recipient_hash_length=config.min_recipient_hash_length,
    )


ProfileDirectoryDep = Annotated[ProfileDirectory, Depends(get_profile_directory)]
MailboxStoreDep = Annotated[MailboxStore, Depends(get_mailbox_store)]
