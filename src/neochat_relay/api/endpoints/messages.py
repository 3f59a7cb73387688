"""Mailbox endpoints: send, poll and acknowledge encrypted envelopes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from neochat_relay.api.dependencies import MailboxStoreDep
from neochat_relay.schemas.envelope import SendRequest

router = APIRouter(tags=["messages"])


@router.post("/send")
async def send_envelope(envelope_data: SendRequest, mailbox: MailboxStoreDep) -> dict[str, Any]:
    """Buffer an encrypted envelope for its recipient."""
    message_id = mailbox.send_envelope(envelope_data)
    return {"ok": True, "message_id": message_id}


@router.get("/poll/{recipient_hash}")
async def poll_envelopes(recipient_hash: str, mailbox: MailboxStoreDep) -> dict[str, Any]:
    """Return every pending envelope for a recipient without removing any."""
    envelopes = mailbox.poll_envelopes(recipient_hash)
    return {"messages": [envelope.to_wire() for envelope in envelopes]}


@router.get("/poll/")
async def poll_without_hash(mailbox: MailboxStoreDep) -> dict[str, Any]:
    """An empty recipient hash is rejected like any other short one."""
    return await poll_envelopes("", mailbox)


@router.delete("/ack/{recipient_hash}/{message_id}")
async def ack_envelope(
    recipient_hash: str,
    message_id: str,
    mailbox: MailboxStoreDep,
) -> dict[str, bool]:
    """Delete an envelope after the recipient has received it."""
    mailbox.ack_envelope(recipient_hash, message_id)
    return {"ok": True}
