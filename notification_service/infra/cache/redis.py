"""Redis cache client with connection pooling.

Values are JSON-encoded on write and decoded on read, so a cached ``True``
is stored as ``"true"`` and comes back as the boolean ``True``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol, cast

from redis.asyncio import ConnectionPool, Redis

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from notification_service.core.settings.redis import RedisSettings

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """Minimal key/value contract the mute-setting cache depends on."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool: ...


class RedisCache:
    """Redis cache client with connection pooling.

    If Redis is unreachable when the service starts, ``get``, ``set`` and
    ``health_check`` try to connect again on each call until one succeeds.

    Example:
        cache = RedisCache(get_redis_settings())
        await cache.connect()

        await cache.set("mute:2", False)
        value = await cache.get("mute:2")  # False

        await cache.disconnect()
    """

    def __init__(self, settings: RedisSettings) -> None:
        """Initialize Redis cache client."""
        self._settings = settings
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None

    async def connect(self) -> None:
        """Establish connection to Redis with connection pooling.

        Raises:
            redis.exceptions.ConnectionError: If unable to reach Redis.
        """
        logger.info(
            "Connecting to Redis",
            extra={
                "host": self._settings.host,
                "port": self._settings.port,
                "db": self._settings.db,
                "max_connections": self._settings.max_connections,
            },
        )
        self._pool = ConnectionPool.from_url(
            self._settings.url,
            **self._settings.connection_pool_kwargs(),
        )
        self._client = Redis(connection_pool=self._pool)
        try:
            await cast("Awaitable[bool]", self._client.ping())
        except Exception:
            logger.exception("Failed to connect to Redis")
            await self.disconnect()
            raise
        logger.info("Redis connection established successfully")

    async def disconnect(self) -> None:
        """Close Redis connection and cleanup resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None
        logger.info("Redis connection closed")

    @property
    def client(self) -> Redis:
        """Get the Redis client instance.

        Raises:
            RuntimeError: If not connected.
        """
        if self._client is None:
            msg = "Redis client not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def get(self, key: str) -> Any | None:
        """Get a value from cache.

        Args:
            key: Cache key (namespace prefix is applied here).

        Returns:
            Cached value (deserialized from JSON) or None if not found.
        """
        client = await self._ensure_connected()
        value = await client.get(self._settings.get_prefixed_key(key))
        if value is None:
            return None
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a value in cache.

        Args:
            key: Cache key (namespace prefix is applied here).
            value: Value to cache, JSON serialized.
            ttl: Time to live in seconds; None keeps the key until overwritten.

        Returns:
            True if Redis acknowledged the write.
        """
        client = await self._ensure_connected()
        result = await client.set(
            self._settings.get_prefixed_key(key),
            json.dumps(value),
            ex=ttl,
        )
        return bool(result)

    async def _ensure_connected(self) -> Redis:
        """Return the client, connecting first if startup ran without Redis.

        A failed attempt raises and is retried on the next call.
        """
        if self._client is None:
            await self.connect()
        return self.client

    async def health_check(self) -> bool:
        """Return True when Redis answers PING, reconnecting if needed."""
        try:
            client = await self._ensure_connected()
            return bool(await cast("Awaitable[bool]", client.ping()))
        except Exception:
            logger.warning("Redis health check failed", exc_info=True)
            return False
