"""Application settings and configuration.

This module defines all configuration options for the NeoChat relay.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Relay settings loaded from environment variables.

    Settings can be overridden via environment variables or a ``.env`` file.
    List-valued fields take JSON arrays, e.g. ``CORS_ALLOW_METHODS='["GET"]'``.
    """

    # Application metadata
    app_name: str = Field(default="NeoChat Relay", alias="APP_NAME")
    app_version: str = Field(default="1.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server binding used by the console entry point
    host: str = Field(default="0.0.0.0", alias="RELAY_HOST")
    port: int = Field(default=8787, alias="RELAY_PORT")

    # Key-value store backend
    storage_backend: Literal["memory", "redis"] = Field(
        default="memory",
        alias="RELAY_STORAGE_BACKEND",
    )
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    key_prefix: str = Field(default="", alias="RELAY_KEY_PREFIX")

    # Mailbox policy
    message_ttl_seconds: int = Field(
        default=7 * 24 * 3600,
        gt=0,
        alias="RELAY_MESSAGE_TTL_SECONDS",
    )
    poll_limit: int = Field(default=100, gt=0, alias="RELAY_POLL_LIMIT")
    min_recipient_hash_length: int = Field(
        default=2,
        ge=1,
        alias="RELAY_MIN_RECIPIENT_HASH_LENGTH",
    )

    # Whether 500 responses carry the underlying exception text
    expose_internal_errors: bool = Field(default=True, alias="RELAY_EXPOSE_INTERNAL_ERRORS")

    # CORS headers applied to every response, preflight included
    cors_allow_origin: str = Field(default="*", alias="CORS_ALLOW_ORIGIN")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "X-NeoChat-ID"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_headers(self) -> dict[str, str]:
        """Return the CORS headers attached to every response."""
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": ", ".join(self.cors_allow_methods),
            "Access-Control-Allow-Headers": ", ".join(self.cors_allow_headers),
        }

    @property
    def banner(self) -> str:
        """Plain-text body returned for unmatched routes (``NeoChat Relay v1.1``)."""
        major_minor = ".".join(self.app_version.split(".")[:2])
        return f"{self.app_name} v{major_minor}"


settings = Settings()
