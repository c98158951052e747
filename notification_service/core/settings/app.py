"""Application-level settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """HTTP application metadata and server options.

    Environment variables use APP_ prefix.
    Example: APP_API_PREFIX=/api/v1, APP_PORT=8000
    """

    service_name: str = Field(
        default="notification-service",
        min_length=1,
        max_length=100,
        description="Service name used in logs and metrics",
    )
    title: str = Field(
        default="Notification Service",
        description="API title shown in OpenAPI docs",
    )
    version: str = Field(default="0.1.0", description="API version")
    environment: Environment = Field(
        default="development",
        description="Deployment environment",
    )
    api_prefix: str = Field(
        default="/api/v1",
        description="Prefix for all notification routes",
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    host: str = Field(default="0.0.0.0", description="Server bind host")  # noqa: S104
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("api_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        """Ensure the prefix starts with a slash and has no trailing slash."""
        value = value.strip()
        if not value:
            return ""
        if not value.startswith("/"):
            value = f"/{value}"
        return value.rstrip("/")
