"""Error kinds raised by the relay services.

Each error carries the HTTP status it maps to at the request-dispatch
boundary (see ``neochat_relay.main``). Messages are returned to the caller
verbatim as ``{"error": message}``.
"""

from __future__ import annotations

from typing import ClassVar

from fastapi import status


class RelayError(RuntimeError):
    """Base exception for relay failures.

    This is the base class for every error the relay maps to a response.
    """

    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """Raised when a required field is missing or malformed."""

    status_code: ClassVar[int] = status.HTTP_400_BAD_REQUEST


class NotFoundError(RelayError):
    """Raised when a requested record does not exist."""

    status_code: ClassVar[int] = status.HTTP_404_NOT_FOUND


class StorageError(RelayError):
    """Raised when the backing key-value store fails."""


def missing_fields_error(fields: tuple[str, ...]) -> ValidationError:
    """Return the validation error listing every required field of a request."""
    return ValidationError(f"Missing required fields: {', '.join(fields)}")
