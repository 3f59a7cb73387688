"""Tests for the mailbox store service."""

import json

import pytest

from neochat_relay.core.errors import ValidationError
from neochat_relay.schemas import SendRequest
from neochat_relay.services import MailboxStore
from neochat_relay.storage import InMemoryKeyValueStore

from tests.conftest import FakeClock, FakeMillisClock

WEEK_SECONDS = 7 * 24 * 3600


@pytest.fixture()
def mailbox(store: InMemoryKeyValueStore, millis_clock: FakeMillisClock) -> MailboxStore:
    return MailboxStore(store, clock=millis_clock)


def _send(mailbox: MailboxStore, to: str, message_id: str, payload: str = "Q0lQSEVS", **extra):
    return mailbox.send_envelope(
        SendRequest(to=to, payload=payload, message_id=message_id, **extra)
    )


def test_send_stores_envelope_under_recipient_key(
    mailbox: MailboxStore, store: InMemoryKeyValueStore, millis_clock: FakeMillisClock
) -> None:
    assert _send(mailbox, "u1abc", "m1") == "m1"

    stored = json.loads(store.get("msg:u1abc:m1"))
    assert stored == {
        "from": "anonymous",
        "to": "u1abc",
        "payload": "Q0lQSEVS",
        "message_id": "m1",
        "timestamp": millis_clock.now,
    }


def test_send_keeps_sender(mailbox: MailboxStore) -> None:
    mailbox.send_envelope(SendRequest.model_validate(
        {"from": "bob1", "to": "u1abc", "payload": "eA==", "message_id": "m1"}
    ))
    [envelope] = mailbox.poll_envelopes("u1abc")
    assert envelope.sender == "bob1"


@pytest.mark.parametrize("missing", ["to", "payload", "message_id"])
def test_send_requires_fields(mailbox: MailboxStore, missing: str) -> None:
    data = {"to": "u1abc", "payload": "eA==", "message_id": "m1"}
    data[missing] = ""
    with pytest.raises(ValidationError, match="Missing required fields: to, payload, message_id"):
        mailbox.send_envelope(SendRequest(**data))


def test_resend_overwrites(mailbox: MailboxStore, millis_clock: FakeMillisClock) -> None:
    _send(mailbox, "u1abc", "m1", payload="Zmlyc3Q=")
    first_timestamp = millis_clock.now
    millis_clock.advance(1000)
    _send(mailbox, "u1abc", "m1", payload="c2Vjb25k")

    envelopes = mailbox.poll_envelopes("u1abc")
    assert len(envelopes) == 1
    assert envelopes[0].payload == "c2Vjb25k"
    assert envelopes[0].timestamp == first_timestamp + 1000


def test_poll_returns_all_distinct_messages(mailbox: MailboxStore) -> None:
    payloads = {f"m{i}": f"cGF5bG9hZC0{i}==" for i in range(7)}
    for message_id, payload in payloads.items():
        _send(mailbox, "u1abc", message_id, payload=payload)
    _send(mailbox, "other", "m0")

    envelopes = mailbox.poll_envelopes("u1abc")
    assert {e.message_id: e.payload for e in envelopes} == payloads


def test_poll_does_not_remove(mailbox: MailboxStore) -> None:
    _send(mailbox, "u1abc", "m1")
    assert len(mailbox.poll_envelopes("u1abc")) == 1
    assert len(mailbox.poll_envelopes("u1abc")) == 1


def test_poll_is_capped(store: InMemoryKeyValueStore) -> None:
    mailbox = MailboxStore(store, poll_limit=3)
    for i in range(5):
        _send(mailbox, "u1abc", f"m{i}")
    assert len(mailbox.poll_envelopes("u1abc")) == 3


@pytest.mark.parametrize("recipient", ["", "a"])
def test_poll_rejects_short_hash(mailbox: MailboxStore, recipient: str) -> None:
    with pytest.raises(ValidationError, match="Invalid user hash"):
        mailbox.poll_envelopes(recipient)


def test_poll_skips_corrupted_values(mailbox: MailboxStore, store: InMemoryKeyValueStore) -> None:
    _send(mailbox, "u1abc", "good")
    store.put("msg:u1abc:bad", "{truncated")
    store.put("msg:u1abc:partial", json.dumps({"to": "u1abc"}))

    assert [e.message_id for e in mailbox.poll_envelopes("u1abc")] == ["good"]


class VanishingStore(InMemoryKeyValueStore):
    """Store where one key disappears between ``list`` and ``get``."""

    def __init__(self, vanishing_key: str) -> None:
        super().__init__()
        self.vanishing_key = vanishing_key

    def list(self, prefix: str, limit: int) -> list[str]:
        names = super().list(prefix, limit)
        self.delete(self.vanishing_key)
        return names


def test_poll_skips_values_raced_out_after_listing() -> None:
    store = VanishingStore("msg:u1abc:m1")
    mailbox = MailboxStore(store)
    _send(mailbox, "u1abc", "m1")
    _send(mailbox, "u1abc", "m2")

    assert [e.message_id for e in mailbox.poll_envelopes("u1abc")] == ["m2"]


def test_ack_removes_only_named_envelope(mailbox: MailboxStore) -> None:
    _send(mailbox, "u1abc", "m1")
    _send(mailbox, "u1abc", "m2")
    _send(mailbox, "u2abc", "m1")

    mailbox.ack_envelope("u1abc", "m1")

    assert [e.message_id for e in mailbox.poll_envelopes("u1abc")] == ["m2"]
    assert [e.message_id for e in mailbox.poll_envelopes("u2abc")] == ["m1"]


def test_poll_ignores_recipients_sharing_the_prefix(mailbox: MailboxStore) -> None:
    _send(mailbox, "alice", "m1", payload="Zm9y")
    _send(mailbox, "alice:evil", "x1", payload="bm90")

    polled = mailbox.poll_envelopes("alice")

    assert [(e.to, e.message_id) for e in polled] == [("alice", "m1")]
    assert [e.message_id for e in mailbox.poll_envelopes("alice:evil")] == ["x1"]


def test_ack_is_idempotent(mailbox: MailboxStore) -> None:
    mailbox.ack_envelope("u1abc", "never-sent")
    _send(mailbox, "u1abc", "m1")
    mailbox.ack_envelope("u1abc", "m1")
    mailbox.ack_envelope("u1abc", "m1")
    assert mailbox.poll_envelopes("u1abc") == []


def test_envelopes_expire_after_ttl(
    mailbox: MailboxStore, clock: FakeClock
) -> None:
    _send(mailbox, "u1abc", "m1")
    clock.advance(WEEK_SECONDS - 1)
    assert len(mailbox.poll_envelopes("u1abc")) == 1
    clock.advance(1)
    assert mailbox.poll_envelopes("u1abc") == []


def test_resend_refreshes_ttl(mailbox: MailboxStore, clock: FakeClock) -> None:
    _send(mailbox, "u1abc", "m1")
    clock.advance(WEEK_SECONDS - 10)
    _send(mailbox, "u1abc", "m1")
    clock.advance(WEEK_SECONDS - 10)
    assert len(mailbox.poll_envelopes("u1abc")) == 1


def test_custom_ttl(store: InMemoryKeyValueStore, clock: FakeClock) -> None:
    mailbox = MailboxStore(store, ttl_seconds=60)
    _send(mailbox, "u1abc", "m1")
    clock.advance(60)
    assert mailbox.poll_envelopes("u1abc") == []
