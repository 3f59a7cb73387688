"""Mailbox store: pending envelopes keyed by recipient and message id.

Delivery is at-least-once. Envelopes stay pending until the recipient
acknowledges them or the store expires them after the configured TTL; the
relay itself runs no sweep. Polling returns a best-effort snapshot: keys
that disappear between the listing and the read (a concurrent ack or
expiry) and values that fail to decode are skipped, never fatal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError as SchemaValidationError

from neochat_relay.core.errors import ValidationError, missing_fields_error
from neochat_relay.core.time import now_ms
from neochat_relay.schemas.envelope import ANONYMOUS_SENDER, Envelope, SendRequest
from neochat_relay.storage import KeyValueStore

logger = logging.getLogger(__name__)

MESSAGE_KEY_PREFIX = "msg:"
REQUIRED_SEND_FIELDS = ("to", "payload", "message_id")

DEFAULT_MESSAGE_TTL_SECONDS = 7 * 24 * 3600
DEFAULT_POLL_LIMIT = 100
DEFAULT_MIN_RECIPIENT_HASH_LENGTH = 2


def mailbox_prefix(recipient: str) -> str:
    return f"{MESSAGE_KEY_PREFIX}{recipient}:"


def message_key(recipient: str, message_id: str) -> str:
    return f"{mailbox_prefix(recipient)}{message_id}"


class MailboxStore:
    """Send, poll and acknowledge envelopes for offline recipients."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl_seconds: int = DEFAULT_MESSAGE_TTL_SECONDS,
        poll_limit: int = DEFAULT_POLL_LIMIT,
        min_recipient_hash_length: int = DEFAULT_MIN_RECIPIENT_HASH_LENGTH,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self.ttl_seconds = ttl_seconds
        self.poll_limit = poll_limit
        self.min_recipient_hash_length = min_recipient_hash_length
        self._clock = clock

    def send_envelope(self, request: SendRequest) -> str:
        """Upsert an envelope and return its message id.

        Re-sending the same ``(to, message_id)`` overwrites the stored envelope,
        stamps a new timestamp and restarts its TTL.
        """
        if not request.to or not request.payload or not request.message_id:
            raise missing_fields_error(REQUIRED_SEND_FIELDS)

        envelope = Envelope(
            sender=request.sender or ANONYMOUS_SENDER,
            to=request.to,
            payload=request.payload,
            message_id=request.message_id,
            timestamp=self._clock(),
        )
        self._store.put(
            message_key(envelope.to, envelope.message_id),
            envelope.model_dump_json(by_alias=True),
            ttl=self.ttl_seconds,
        )
        logger.info("Stored envelope %s for %s", envelope.message_id, envelope.to)
        return envelope.message_id

    def poll_envelopes(self, recipient_hash: str) -> list[Envelope]:
        """Return the pending envelopes for ``recipient_hash`` in no particular order."""
        if not recipient_hash or len(recipient_hash) < self.min_recipient_hash_length:
            raise ValidationError("Invalid user hash")

        envelopes: list[Envelope] = []
        for key in self._store.list(mailbox_prefix(recipient_hash), self.poll_limit):
            value = self._store.get(key)
            if value is None:
                logger.debug("Envelope %s vanished before it could be read", key)
                continue
            try:
                envelope = Envelope.model_validate_json(value)
            except SchemaValidationError:
                logger.warning("Skipping corrupted envelope %s", key)
                continue
            # "msg:alice:" also prefixes keys of a recipient named "alice:x".
            if envelope.to != recipient_hash:
                logger.debug("Skipping envelope %s addressed to another mailbox", key)
                continue
            envelopes.append(envelope)
        logger.debug("Poll for %s returned %d envelopes", recipient_hash, len(envelopes))
        return envelopes

    def ack_envelope(self, recipient_hash: str, message_id: str) -> None:
        """Delete one envelope. Acknowledging an absent envelope is not an error."""
        self._store.delete(message_key(recipient_hash, message_id))
        logger.info("Acknowledged envelope %s for %s", message_id, recipient_hash)
