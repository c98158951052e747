"""Store gateway for notifications and mute settings.

Every operation opens its own session from the injected factory, so the
gateway can be shared by the HTTP layer and the queue worker.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from sqlalchemy import exists, func, select, update

from notification_service.core.exceptions import NotFoundException
from notification_service.features.notifications.models import EventType, MuteSetting, Notification
from notification_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from sqlalchemy.sql import Select


@dataclass(frozen=True, slots=True)
class MutedSettingRow:
    """Projection of a muted setting joined with its event-type label."""

    setting_id: int
    event_type: str
    is_muted: bool


def setting_not_found(event_id: int) -> NotFoundException:
    return NotFoundException(
        detail=f"No notification setting found for event ID: {event_id}",
        type="setting-not-found",
        extra={"event_id": event_id},
    )


class NotificationStore:
    """Gateway over the ``notifications`` and ``notificationsettings`` tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)
        self._lazy = get_lazy_logger(__name__)

    async def find_setting(self, event_id: int) -> MuteSetting:
        """Return the mute setting for ``event_id``.

        Raises:
            NotFoundException: If no setting row exists for the event.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(MuteSetting).where(MuteSetting.event_id == event_id),
            )
            setting = result.scalar_one_or_none()

        if setting is None:
            raise setting_not_found(event_id)
        self._lazy.debug(lambda: f"db.find_setting: event={event_id} -> is_muted={setting.is_muted}")
        return setting

    async def update_setting(self, event_id: int, is_muted: bool) -> None:
        """Set the mute flag for ``event_id``.

        Raises:
            NotFoundException: If no setting row exists for the event.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                update(MuteSetting)
                .where(MuteSetting.event_id == event_id)
                .values(is_muted=is_muted),
            )
            if result.rowcount == 0:
                await session.rollback()
                raise setting_not_found(event_id)
            await session.commit()

        self._logger.info(
            "Mute setting updated",
            extra={"event_id": event_id, "is_muted": is_muted, "operation": "db.update_setting"},
        )

    async def insert_notification(self, event_id: int, tenant_id: int, message: str) -> Notification:
        """Append a notification row and return it."""
        notification = Notification(event_id=event_id, tenant_id=tenant_id, message=message)
        async with self._session_factory() as session:
            session.add(notification)
            await session.commit()
            await session.refresh(notification)

        self._lazy.debug(
            lambda: f"db.insert_notification: id={notification.id} tenant={tenant_id} event={event_id}"
        )
        return notification

    async def has_notifications_for_event(self, tenant_id: int, event_id: int) -> bool:
        """Return True if the tenant has at least one notification for the event."""
        stmt = select(
            exists().where(
                Notification.tenant_id == tenant_id,
                Notification.event_id == event_id,
            ),
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return bool(result.scalar())

    async def count_notifications(self, tenant_id: int, event_id: int | None = None) -> int:
        """Count the tenant's notifications, optionally for one event type."""
        stmt = _scoped(select(func.count(Notification.id)), tenant_id, event_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def fetch_notifications(
        self,
        tenant_id: int,
        event_id: int | None = None,
        *,
        limit: int,
        offset: int,
    ) -> Sequence[Notification]:
        """Fetch one slice of the tenant's notifications, oldest first."""
        stmt = (
            _scoped(select(Notification), tenant_id, event_id)
            .order_by(Notification.id.asc())
            .limit(limit)
            .offset(offset)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.fetch_notifications: tenant={tenant_id} event={event_id} "
            f"limit={limit} offset={offset} -> {len(items)} items"
        )
        return items

    async def list_muted_settings(self) -> list[MutedSettingRow]:
        """Return every muted setting with its event-type label."""
        stmt = (
            select(MuteSetting.id, EventType.event_type, MuteSetting.is_muted)
            .join(EventType, EventType.id == MuteSetting.event_id)
            .where(MuteSetting.is_muted.is_(True))
            .order_by(MuteSetting.id.asc())
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [
                MutedSettingRow(setting_id=row.id, event_type=row.event_type, is_muted=row.is_muted)
                for row in result
            ]


def _scoped(stmt: Select, tenant_id: int, event_id: int | None) -> Select:
    stmt = stmt.where(Notification.tenant_id == tenant_id)
    if event_id is not None:
        stmt = stmt.where(Notification.event_id == event_id)
    return stmt
