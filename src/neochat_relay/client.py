"""HTTP client for talking to a NeoChat relay.

This is the client side of the relay transport: it deposits already-encrypted
envelopes, polls and acknowledges a mailbox, and reads or publishes profiles.
Choosing between the relay and other transports is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from neochat_relay.schemas.envelope import Envelope
from neochat_relay.schemas.profile import Profile, UserStatus

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "http://localhost:8787"
DEFAULT_TIMEOUT_SECONDS = 10.0


class RelayClientError(RuntimeError):
    """Raised when the relay cannot be reached or answers with an error status."""


class ProfileNotFoundError(RelayClientError):
    """Raised when the relay has no profile for the requested id."""


@dataclass(frozen=True)
class RelayConfig:
    """Connection settings for a relay endpoint."""

    relay_url: str = DEFAULT_RELAY_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ProfileUpdate:
    """Profile fields a client publishes about itself."""

    id: str
    username: str
    status: UserStatus = UserStatus.OFFLINE
    avatar_url: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "status": self.status.value,
            "avatar_url": self.avatar_url,
        }


class RelayClient:
    """Blocking client for the relay HTTP API."""

    def __init__(
        self,
        config: RelayConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or RelayConfig()
        self._client = httpx.Client(
            base_url=self.config.relay_url.rstrip("/"),
            timeout=httpx.Timeout(self.config.timeout_seconds),
            transport=transport,
        )

    def __enter__(self) -> RelayClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Relay request %s %s failed: %s", method, path, exc)
            raise RelayClientError(f"Relay request failed: {exc}") from exc

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if not response.is_success:
            raise RelayClientError(f"Relay error: {response.status_code}")

    def send(self, envelope: Envelope) -> None:
        """Deposit an envelope for its recipient."""
        response = self._request("POST", "/send", json=envelope.to_wire())
        self._check(response)

    def poll(self, user_hash: str) -> list[Envelope]:
        """Fetch every pending envelope addressed to ``user_hash``."""
        response = self._request("GET", f"/poll/{user_hash}")
        self._check(response)
        try:
            messages = response.json()["messages"]
            return [Envelope.model_validate(message) for message in messages]
        except (ValueError, KeyError, TypeError) as exc:
            raise RelayClientError(f"Malformed poll response: {exc}") from exc

    def ack(self, user_hash: str, message_id: str) -> None:
        """Tell the relay an envelope has been received so it can be deleted."""
        response = self._request("DELETE", f"/ack/{user_hash}/{message_id}")
        self._check(response)

    def update_profile(self, update: ProfileUpdate) -> Profile:
        """Publish this client's profile and return the stored record."""
        response = self._request("POST", "/profile", json=update.to_json())
        self._check(response)
        return Profile.model_validate(response.json()["profile"])

    def get_profile(self, user_id: str) -> Profile:
        """Look up another user's public profile."""
        response = self._request("GET", f"/profile/{user_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise ProfileNotFoundError("User not found")
        self._check(response)
        return Profile.model_validate(response.json())

    def status(self) -> dict[str, Any]:
        """Return the relay's health check payload."""
        response = self._request("GET", "/status")
        self._check(response)
        return response.json()
