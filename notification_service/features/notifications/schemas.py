"""Response and request schemas for the notifications API."""

from __future__ import annotations

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool

T = TypeVar("T")


class NotificationRead(BaseModel):
    """Notification as returned to tenants."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: int
    tenant_id: int
    message: str
    created_at: datetime | None = None


class MutedSettingRead(BaseModel):
    """Muted event type with its label."""

    id: int
    event_type: str
    is_muted: bool


class MuteStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_muted: bool = Field(serialization_alias="isMuted")


class MuteSettingUpdate(BaseModel):
    """Body of ``POST settings/{eventId}``."""

    model_config = ConfigDict(populate_by_name=True)

    is_muted: StrictBool = Field(alias="isMuted", description="Mute (true) or unmute (false)")


class MessageResponse(BaseModel):
    """``{status, message}`` envelope for endpoints without a payload."""

    status: Literal["success"] = "success"
    message: str


class ApiResponse(MessageResponse, Generic[T]):
    """``{status, message, data}`` envelope."""

    data: T


class PaginatedResponse(ApiResponse[list[NotificationRead]]):
    """Notification listing with the total number of matching rows."""

    total_count: int = Field(serialization_alias="totalCount")


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    worker_running: bool
    database: bool
    cache: bool
