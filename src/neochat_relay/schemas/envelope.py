"""Mailbox envelope Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

ANONYMOUS_SENDER = "anonymous"


class Envelope(BaseModel):
    """Encrypted message buffered for one recipient.

    The relay never looks inside ``payload``.
    """

    sender: str = Field(ANONYMOUS_SENDER, alias="from", description="Sender identifier, unverified")
    to: str = Field(..., description="Recipient identifier")
    payload: str = Field(..., description="Base64 end-to-end encrypted blob")
    message_id: str = Field(..., description="Caller-supplied id, unique per recipient")
    timestamp: int = Field(..., description="Milliseconds since epoch of the last send")

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        """Return the JSON shape used on the wire and in storage."""
        return self.model_dump(by_alias=True)


class SendRequest(BaseModel):
    """Body of ``POST /send``; required fields are checked by the mailbox."""

    sender: str | None = Field(None, alias="from")
    to: str | None = None
    payload: str | None = None
    message_id: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

