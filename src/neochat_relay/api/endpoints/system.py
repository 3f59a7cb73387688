"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from neochat_relay.api.dependencies import SettingsDep
from neochat_relay.core.time import now_ms

router = APIRouter(tags=["system"])


@router.get("/status")
async def get_status(config: SettingsDep) -> dict[str, object]:
    """Report that the relay is up, with its name and version."""
    return {
        "status": "ok",
        "service": config.app_name,
        "version": config.app_version,
        "timestamp": now_ms(),
    }
