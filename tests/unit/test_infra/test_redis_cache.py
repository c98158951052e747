"""Unit tests for RedisCache value encoding and key prefixing."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from notification_service.core.settings import RedisSettings
from notification_service.infra.cache import RedisCache


@pytest.fixture
def redis_client() -> AsyncMock:
    storage: dict[str, str] = {}
    client = AsyncMock()

    async def mock_get(key: str):
        return storage.get(key)

    async def mock_set(key: str, value, ex=None):
        storage[key] = value
        return True

    client.get.side_effect = mock_get
    client.set.side_effect = mock_set
    client.storage = storage
    return client


def make_cache(client: AsyncMock, **settings) -> RedisCache:
    cache = RedisCache(RedisSettings(**settings))
    cache._client = client
    return cache


class TestRedisCache:
    async def test_booleans_round_trip_as_json(self, redis_client):
        cache = make_cache(redis_client)

        await cache.set("mute:2", False)

        assert redis_client.storage["mute:2"] == "false"
        assert await cache.get("mute:2") is False

    async def test_missing_key_returns_none(self, redis_client):
        assert await make_cache(redis_client).get("mute:404") is None

    async def test_ttl_is_passed_as_expiry(self, redis_client):
        await make_cache(redis_client).set("mute:1", True, ttl=30)

        redis_client.set.assert_awaited_once_with("mute:1", "true", ex=30)

    async def test_key_prefix(self, redis_client):
        cache = make_cache(redis_client, key_prefix="notifications:")

        await cache.set("mute:1", True)

        assert "notifications:mute:1" in redis_client.storage
        assert await cache.get("mute:1") is True

    async def test_non_json_value_is_returned_raw(self, redis_client):
        redis_client.storage["legacy"] = "not-json"

        assert await make_cache(redis_client).get("legacy") == "not-json"

    async def test_reconnects_on_first_use_after_failed_startup(self, redis_client):
        cache = RedisCache(RedisSettings())

        async def connect():
            cache._client = redis_client

        cache.connect = AsyncMock(side_effect=connect)

        assert await cache.set("mute:1", True) is True
        assert await cache.get("mute:1") is True
        cache.connect.assert_awaited_once()

    async def test_unreachable_redis_fails_each_call_and_retries(self):
        cache = RedisCache(RedisSettings())
        cache.connect = AsyncMock(side_effect=ConnectionError("redis down"))

        with pytest.raises(ConnectionError):
            await cache.get("mute:1")
        assert await cache.health_check() is False
        assert cache.connect.await_count == 2
        assert cache.is_connected is False
