"""Public profile directory backed by the key-value store."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError as SchemaValidationError

from neochat_relay.core.errors import NotFoundError, StorageError, missing_fields_error
from neochat_relay.core.time import now_ms
from neochat_relay.schemas.profile import Profile, ProfileUpdateRequest, UserStatus
from neochat_relay.storage import KeyValueStore

logger = logging.getLogger(__name__)

PROFILE_KEY_PREFIX = "profile:"
REQUIRED_PROFILE_FIELDS = ("id", "username")


def profile_key(user_id: str) -> str:
    return f"{PROFILE_KEY_PREFIX}{user_id}"


class ProfileDirectory:
    """Upsert and look up self-asserted user profiles.

    Writes are full replacements with last-write-wins semantics; there is no
    version check between concurrent writers of the same id.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = now_ms) -> None:
        self._store = store
        self._clock = clock

    def upsert_profile(self, request: ProfileUpdateRequest) -> Profile:
        """Replace the profile for ``request.id`` and return the stored record.

        ``last_seen`` is the time of this write. It is bumped past the previous
        record's value when the clock has not advanced, so successive updates
        always observe a strictly larger ``last_seen``.
        """
        if not request.id or not request.username:
            raise missing_fields_error(REQUIRED_PROFILE_FIELDS)

        last_seen = self._clock()
        previous = self._load(request.id)
        if previous is not None and previous.last_seen >= last_seen:
            last_seen = previous.last_seen + 1

        profile = Profile(
            id=request.id,
            username=request.username,
            status=request.status or UserStatus.OFFLINE,
            avatar_url=request.avatar_url or None,
            last_seen=last_seen,
        )
        self._store.put(profile_key(profile.id), profile.model_dump_json())
        logger.info("Profile updated for %s", profile.id)
        return profile

    def get_profile(self, user_id: str) -> Profile:
        """Return the stored profile for ``user_id``.

        Raises:
            NotFoundError: if the id is empty or nothing is stored for it.
            StorageError: if the stored record cannot be decoded.
        """
        if not user_id:
            raise NotFoundError("User not found")
        value = self._store.get(profile_key(user_id))
        if value is None:
            raise NotFoundError("User not found")
        try:
            return Profile.model_validate_json(value)
        except SchemaValidationError as exc:
            logger.warning("Stored profile for %s is corrupted", user_id)
            raise StorageError("Stored profile is corrupted") from exc

    def _load(self, user_id: str) -> Profile | None:
        value = self._store.get(profile_key(user_id))
        if value is None:
            return None
        try:
            return Profile.model_validate_json(value)
        except SchemaValidationError:
            return None
