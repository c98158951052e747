"""Notification orchestration: write path, read path and settings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from notification_service.core.exceptions import (
    AppException,
    InternalServerException,
    NotFoundException,
)
from notification_service.core.services import BaseService
from notification_service.features.notifications.pagination import (
    Page,
    PageRequest,
    ensure_page_in_range,
    parse_positive_int,
)
from notification_service.infra.metrics import (
    notifications_created_total,
    notifications_skipped_total,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from notification_service.features.notifications.models import Notification
    from notification_service.features.notifications.mute_cache import MuteSettingCache
    from notification_service.features.notifications.repository import (
        MutedSettingRow,
        NotificationStore,
    )
    from notification_service.infra.cache import CacheBackend
    from notification_service.infra.observability import Observability

T = TypeVar("T")


class NotificationService(BaseService):
    """Business logic for creating and reading tenant notifications.

    Client-facing failures (invalid input, missing resources) keep their
    specific kind on the read and settings paths. Anything else is recorded
    through the observability collaborator and re-raised as an opaque
    :class:`InternalServerException`.
    """

    def __init__(
        self,
        store: NotificationStore,
        mute_cache: MuteSettingCache,
        observability: Observability,
    ) -> None:
        super().__init__()
        self._store = store
        self._mute_cache = mute_cache
        self._observability = observability

    async def create_notification(self, event_id: int, tenant_id: int, message: str) -> bool:
        """Persist a notification unless its event type is muted.

        Returns:
            True if a notification was stored, False if the event is muted.

        Raises:
            InternalServerException: On any failure, including a missing mute
                setting. The caller must not acknowledge the message.
        """
        self._observability.add_breadcrumb(
            "Notification received",
            event_id=event_id,
            tenant_id=tenant_id,
        )
        try:
            is_muted = await self._mute_cache.is_muted(event_id)
            self._observability.add_breadcrumb(
                "Mute status checked",
                event_id=event_id,
                is_muted=is_muted,
            )
            if is_muted:
                notifications_skipped_total.inc()
                self._lazy.debug(lambda: f"Event {event_id} is muted; notification for tenant {tenant_id} dropped")
                self._observability.add_breadcrumb("Notification skipped", event_id=event_id)
                return False

            notification = await self._store.insert_notification(event_id, tenant_id, message)
        except Exception as exc:
            raise self._internal_error(
                exc,
                "Failed to create notification",
                operation="create_notification",
                event_id=event_id,
                tenant_id=tenant_id,
            ) from exc

        notifications_created_total.inc()
        self._observability.add_breadcrumb(
            "Notification created",
            notification_id=notification.id,
            event_id=event_id,
            tenant_id=tenant_id,
        )
        self.logger.info(
            "Notification created",
            extra={"notification_id": notification.id, "event_id": event_id, "tenant_id": tenant_id},
        )
        return True

    async def get_notifications(
        self,
        tenant_id: int,
        event_id: Any = None,
        page: Any = 1,
        limit: Any = 10,
    ) -> Page[Notification]:
        """Return one page of the tenant's notifications.

        Raises:
            InvalidArgumentException: If page, limit or event id is not a
                positive integer.
            NotFoundException: If ``event_id`` is given and the tenant has no
                notifications for it, or if the page is past the last one.
            InternalServerException: On store failures.
        """
        request = PageRequest.of(page, limit)
        if event_id is not None:
            event_id = parse_positive_int(event_id, "event_id")

        async def run() -> Page[Notification]:
            if event_id is not None and not await self._store.has_notifications_for_event(
                tenant_id, event_id
            ):
                raise NotFoundException(
                    detail=f"No notifications found for event ID: {event_id}",
                    type="event-not-found",
                    extra={"event_id": event_id},
                )

            total = await self._store.count_notifications(tenant_id, event_id)
            if total == 0:
                return Page(items=[], total=0, page=request.page, limit=request.limit)

            ensure_page_in_range(request, total)
            items = await self._store.fetch_notifications(
                tenant_id,
                event_id,
                limit=request.limit,
                offset=request.offset,
            )
            return Page(items=list(items), total=total, page=request.page, limit=request.limit)

        result = await self._guard(
            run(),
            "Failed to fetch notifications",
            operation="get_notifications",
            tenant_id=tenant_id,
            event_id=event_id,
        )
        self._observability.add_breadcrumb(
            "Notifications fetched",
            tenant_id=tenant_id,
            event_id=event_id,
            page=request.page,
            total=result.total,
        )
        return result

    async def get_notification_settings(self) -> list[MutedSettingRow]:
        """Return every muted setting with its event-type label."""
        settings = await self._guard(
            self._store.list_muted_settings(),
            "Failed to fetch notification settings",
            operation="get_notification_settings",
        )
        self._observability.add_breadcrumb("Notification settings fetched", count=len(settings))
        return settings

    async def update_setting(self, event_id: Any, is_muted: bool) -> None:
        """Mute or unmute an event type.

        Raises:
            InvalidArgumentException: If ``event_id`` is not a positive integer.
            NotFoundException: If no setting exists for the event.
            InternalServerException: On store or cache failures.
        """
        event_id = parse_positive_int(event_id, "event_id")
        await self._guard(
            self._mute_cache.set_muted(event_id, is_muted),
            "Failed to update notification setting",
            operation="update_setting",
            event_id=event_id,
        )

    async def is_muted(self, event_id: Any) -> bool:
        """Return whether an event type is muted.

        Raises:
            InvalidArgumentException: If ``event_id`` is not a positive integer.
            NotFoundException: If no setting exists for the event.
            InternalServerException: On store or cache failures.
        """
        event_id = parse_positive_int(event_id, "event_id")
        return await self._guard(
            self._mute_cache.is_muted(event_id),
            "Failed to fetch notification setting",
            operation="is_muted",
            event_id=event_id,
        )

    async def _guard(self, awaitable: Awaitable[T], detail: str, **context: Any) -> T:
        """Await ``awaitable``, funnelling unexpected failures to an opaque error."""
        try:
            return await awaitable
        except AppException:
            raise
        except Exception as exc:
            raise self._internal_error(exc, detail, **context) from exc

    def _internal_error(self, exc: Exception, detail: str, **context: Any) -> InternalServerException:
        self.logger.exception(detail, extra=context)
        self._observability.record_error(exc, **context)
        return InternalServerException(detail=detail)


def create_notification_service(
    session_factory: async_sessionmaker[AsyncSession],
    cache: CacheBackend,
    *,
    observability: Observability | None = None,
    mute_ttl: int | None = None,
) -> NotificationService:
    """Wire the store, mute cache and orchestrator together."""
    from notification_service.features.notifications.mute_cache import MuteSettingCache
    from notification_service.features.notifications.repository import NotificationStore
    from notification_service.infra.observability import TracingObservability

    observability = observability or TracingObservability()
    store = NotificationStore(session_factory)
    mute_cache = MuteSettingCache(store, cache, ttl=mute_ttl, observability=observability)
    return NotificationService(store, mute_cache, observability)
