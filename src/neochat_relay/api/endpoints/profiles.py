"""Profile directory endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from neochat_relay.api.dependencies import ProfileDirectoryDep
from neochat_relay.schemas.profile import ProfileUpdateRequest

router = APIRouter(prefix="/profile", tags=["profiles"])


@router.post("")
async def update_profile(
    profile_data: ProfileUpdateRequest,
    directory: ProfileDirectoryDep,
) -> dict[str, Any]:
    """Create or fully replace a user's public profile."""
    profile = directory.upsert_profile(profile_data)
    return {"ok": True, "profile": profile.model_dump(mode="json")}


@router.get("/")
async def get_profile_without_id(directory: ProfileDirectoryDep) -> dict[str, Any]:
    return await get_profile("", directory)


@router.get("/{user_id}")
async def get_profile(user_id: str, directory: ProfileDirectoryDep) -> dict[str, Any]:
    """Return the stored profile for ``user_id``."""
    return directory.get_profile(user_id).model_dump(mode="json")
