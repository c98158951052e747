"""Cache-aside lookup of per-event mute settings.

Reads consult Redis first and fall back to the store on a miss, populating
the cache with the boolean from the store. Writes go to the store first and
then to the cache. The two writes are sequential, not transactional: if the
cache write fails the cached value stays stale until it is next overwritten
or expires.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notification_service.core.services import BaseService
from notification_service.features.notifications.pagination import parse_positive_int
from notification_service.infra.metrics import mute_cache_lookups_total

if TYPE_CHECKING:
    from notification_service.features.notifications.repository import NotificationStore
    from notification_service.infra.cache import CacheBackend
    from notification_service.infra.observability import Observability

MUTE_KEY_PREFIX = "mute:"


def mute_cache_key(event_id: int) -> str:
    return f"{MUTE_KEY_PREFIX}{event_id}"


class MuteSettingCache(BaseService):
    """Answer "is this event type muted?" from Redis with the store behind it.

    Args:
        store: Authoritative source of mute settings.
        cache: Key/value cache holding ``mute:{event_id}`` -> bool.
        ttl: Optional expiry in seconds for cached entries; None keeps them
            until overwritten.
        observability: Receives a breadcrumb after each half of a write.
    """

    def __init__(
        self,
        store: NotificationStore,
        cache: CacheBackend,
        ttl: int | None = None,
        observability: Observability | None = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._cache = cache
        self._ttl = ttl
        self._observability = observability

    async def is_muted(self, event_id: int) -> bool:
        """Return the mute flag for ``event_id``.

        A cache hit is returned as-is and may be stale relative to a
        concurrent :meth:`set_muted`.

        Raises:
            NotFoundException: If the store has no setting for the event.
        """
        key = mute_cache_key(event_id)
        cached: Any = await self._cache.get(key)
        if isinstance(cached, bool):
            mute_cache_lookups_total.labels(result="hit").inc()
            self._lazy.debug(lambda: f"Mute cache hit: {key} -> {cached}")
            return cached

        if cached is not None:
            self.logger.warning(
                "Ignoring non-boolean mute cache entry",
                extra={"key": key, "value_type": type(cached).__name__},
            )
        mute_cache_lookups_total.labels(result="miss").inc()

        setting = await self._store.find_setting(event_id)
        is_muted = bool(setting.is_muted)
        await self._cache.set(key, is_muted, ttl=self._ttl)
        self._lazy.debug(lambda: f"Mute cache refreshed from store: {key} -> {is_muted}")
        return is_muted

    async def set_muted(self, event_id: Any, is_muted: bool) -> None:
        """Persist the mute flag, then write the same value to the cache.

        Raises:
            InvalidArgumentException: If ``event_id`` is not a positive integer.
            NotFoundException: If the store has no setting for the event.
        """
        event_id = parse_positive_int(event_id, "event_id")
        await self._store.find_setting(event_id)
        await self._store.update_setting(event_id, is_muted)
        self._breadcrumb("Mute setting updated in store", event_id=event_id, is_muted=is_muted)
        await self._cache.set(mute_cache_key(event_id), is_muted, ttl=self._ttl)
        self._breadcrumb("Mute setting updated in cache", event_id=event_id, is_muted=is_muted)
        self.logger.info(
            "Mute setting propagated to cache",
            extra={"event_id": event_id, "is_muted": is_muted},
        )

    def _breadcrumb(self, message: str, **data: Any) -> None:
        if self._observability is not None:
            self._observability.add_breadcrumb(message, **data)
