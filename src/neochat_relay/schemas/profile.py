"""Profile directory Pydantic schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserStatus(str, Enum):
    """Client-reported presence state."""

    ONLINE = "Online"
    OFFLINE = "Offline"
    TYPING = "Typing"


class Profile(BaseModel):
    """Public profile record stored under ``profile:{id}``."""

    id: str = Field(..., description="Opaque user identifier (public key fingerprint)")
    username: str = Field(..., description="Display name")
    status: UserStatus = Field(UserStatus.OFFLINE, description="Self-reported presence")
    avatar_url: str | None = Field(None, description="Optional avatar reference")
    last_seen: int = Field(..., description="Milliseconds since epoch of the last profile update")


class ProfileUpdateRequest(BaseModel):
    """Body of ``POST /profile``.

    Every field is optional at the schema level; presence of ``id`` and
    ``username`` is checked by the profile directory so the error lists both.
    """

    id: str | None = None
    username: str | None = None
    status: UserStatus | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(extra="ignore")

