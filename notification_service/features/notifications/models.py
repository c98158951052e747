"""SQLAlchemy models for the notifications feature.

Table names match the existing notification database so the service can run
against a schema provisioned elsewhere.
"""
from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notification_service.core.database import Base, IntegerPKMixin, TimestampMixin


class EventType(Base, IntegerPKMixin):
    """Reference data describing a kind of domain event."""

    __tablename__ = "notificationevents"

    event_type: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    setting: Mapped[MuteSetting | None] = relationship(back_populates="event", uselist=False)


class MuteSetting(Base, IntegerPKMixin):
    """Per-event-type mute flag. Exactly one row per event type."""

    __tablename__ = "notificationsettings"

    event_id: Mapped[int] = mapped_column(
        ForeignKey("notificationevents.id"),
        unique=True,
        nullable=False,
    )
    is_muted: Mapped[bool] = mapped_column(Boolean(), default=False, nullable=False)

    event: Mapped[EventType] = relationship(back_populates="setting")


class Tenant(Base, IntegerPKMixin):
    """Tenant identity, referenced by id only."""

    __tablename__ = "tenants"

    tenant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)


class Notification(Base, IntegerPKMixin, TimestampMixin):
    """Append-only notification delivered to a tenant."""

    __tablename__ = "notifications"

    event_id: Mapped[int] = mapped_column(
        ForeignKey("notificationevents.id"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=False,
        index=True,
    )
    message: Mapped[str] = mapped_column(Text(), nullable=False)
