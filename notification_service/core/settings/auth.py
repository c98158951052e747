"""Bearer token decoding settings."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Settings for resolving a bearer token to a tenant id.

    Environment variables use AUTH_ prefix.
    Example: AUTH_JWT_SECRET=change-me
    """

    jwt_secret: SecretStr = Field(
        default=SecretStr("change-me"),
        description="Shared secret used to verify token signatures.",
    )
    jwt_algorithm: str = Field(default="HS256", description="Signature algorithm.")
    tenant_claim: str = Field(
        default="tenant_id",
        min_length=1,
        description="Claim carrying the tenant id.",
    )
    verify_expiration: bool = Field(
        default=True,
        description="Reject tokens whose exp claim is in the past.",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
