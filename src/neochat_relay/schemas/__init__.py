"""
Pydantic schemas for relay requests and stored records.

These schemas define the structure of API data for serialization and validation.
"""

from .envelope import ANONYMOUS_SENDER, Envelope, SendRequest
from .profile import Profile, ProfileUpdateRequest, UserStatus

__all__ = [
    "ANONYMOUS_SENDER",
    "Envelope", "SendRequest",
    "Profile", "ProfileUpdateRequest", "UserStatus",
]
