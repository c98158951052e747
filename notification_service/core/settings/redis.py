"""Redis settings for the mute-setting cache."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlparse

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis connection and cache-entry settings.

    Environment variables use REDIS_ prefix.
    Example: REDIS_URL="redis://localhost:6379/0"

    Supports bidirectional configuration:
    1. Provide REDIS_URL → components are parsed automatically
    2. Provide components (host, port, etc.) → URL is built automatically
    """

    # ──────────────────────────────────────────────────────────────
    # Connection configuration (bidirectional)
    # ──────────────────────────────────────────────────────────────

    redis_url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis connection URL. If provided, overrides component fields.",
    )
    host: str = Field(default="localhost", description="Redis server hostname")
    port: int = Field(default=6379, ge=1, le=65535, description="Redis server port")
    db: int = Field(default=0, ge=0, le=15, description="Redis database number")
    password: SecretStr | None = Field(default=None, description="Redis password")

    # ──────────────────────────────────────────────────────────────
    # Connection pool settings
    # ──────────────────────────────────────────────────────────────

    max_connections: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum Redis connection pool size",
    )
    socket_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=60.0,
        description="Socket read/write timeout in seconds",
    )
    socket_connect_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=60.0,
        description="Socket connect timeout in seconds",
    )

    # ──────────────────────────────────────────────────────────────
    # Cache entries
    # ──────────────────────────────────────────────────────────────

    key_prefix: str = Field(
        default="",
        description="Optional namespace prepended to every cache key",
    )
    mute_ttl: int | None = Field(
        default=None,
        ge=1,
        description="TTL in seconds for cached mute flags (None keeps them until overwritten)",
    )

    startup_require_cache: bool = Field(
        default=False,
        description=(
            "Fail application startup when Redis is unavailable. When false the "
            "cache reconnects on first use."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _apply_url(self) -> RedisSettings:
        """Parse redis_url into component fields if provided.

        Uses object.__setattr__ because the model is frozen.
        """
        if not self.redis_url:
            return self
        parsed = urlparse(self.redis_url)
        if parsed.hostname:
            object.__setattr__(self, "host", parsed.hostname)
        if parsed.port:
            object.__setattr__(self, "port", parsed.port)
        if parsed.password:
            object.__setattr__(self, "password", SecretStr(parsed.password))
        if parsed.path and parsed.path.strip("/").isdigit():
            object.__setattr__(self, "db", int(parsed.path.strip("/")))
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def url(self) -> str:
        """Return the effective Redis URL built from components."""
        auth = ""
        if self.password is not None:
            auth = f":{quote(self.password.get_secret_value(), safe='')}@"
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"

    def connection_pool_kwargs(self) -> dict[str, Any]:
        """Return kwargs for redis.asyncio.ConnectionPool.from_url()."""
        return {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": True,
        }

    def get_prefixed_key(self, key: str) -> str:
        """Return key with the configured namespace prefix."""
        return f"{self.key_prefix}{key}" if self.key_prefix else key
