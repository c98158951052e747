"""Cache infrastructure using Redis."""

from __future__ import annotations

from notification_service.infra.cache.redis import CacheBackend, RedisCache

__all__ = ["CacheBackend", "RedisCache"]
