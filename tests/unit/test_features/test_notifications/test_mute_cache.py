"""Unit tests for the cache-aside mute-setting lookup."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from notification_service.core.exceptions import InvalidArgumentException, NotFoundException
from notification_service.features.notifications.mute_cache import MuteSettingCache, mute_cache_key
from tests.utils import MISSING_EVENT, MUTED_EVENT, UNMUTED_EVENT

# ──────────────────────────────────────────────────────────────
# is_muted
# ──────────────────────────────────────────────────────────────


class TestIsMuted:
    """Tests for MuteSettingCache.is_muted."""

    async def test_miss_reads_store_and_populates_cache(self, mute_cache, cache):
        """A cache miss should fall back to the store and cache the boolean."""
        assert await mute_cache.is_muted(MUTED_EVENT) is True

        assert cache.data[mute_cache_key(MUTED_EVENT)] is True

    async def test_unmuted_event_returns_false(self, mute_cache):
        assert await mute_cache.is_muted(UNMUTED_EVENT) is False

    async def test_second_lookup_is_served_from_cache(self, store, cache):
        """After one miss, the next lookup should not touch the store."""
        store.find_setting = AsyncMock(wraps=store.find_setting)
        mute_cache = MuteSettingCache(store, cache)

        first = await mute_cache.is_muted(UNMUTED_EVENT)
        second = await mute_cache.is_muted(UNMUTED_EVENT)

        assert first is second is False
        assert store.find_setting.await_count == 1

    async def test_cache_hit_is_returned_even_if_stale(self, store, cache):
        """A cached value wins over the store until it is overwritten."""
        cache.data[mute_cache_key(UNMUTED_EVENT)] = True
        store.find_setting = AsyncMock(wraps=store.find_setting)

        assert await MuteSettingCache(store, cache).is_muted(UNMUTED_EVENT) is True
        store.find_setting.assert_not_awaited()

    async def test_missing_setting_raises_not_found(self, mute_cache, cache):
        """No setting row is distinct from "not muted"."""
        with pytest.raises(NotFoundException) as exc_info:
            await mute_cache.is_muted(MISSING_EVENT)

        assert exc_info.value.status_code == 404
        assert mute_cache_key(MISSING_EVENT) not in cache.data

    async def test_non_boolean_cache_entry_is_treated_as_miss(self, mute_cache, cache):
        """A string-typed entry is refreshed from the store, not coerced."""
        cache.data[mute_cache_key(UNMUTED_EVENT)] = "true"

        assert await mute_cache.is_muted(UNMUTED_EVENT) is False
        assert cache.data[mute_cache_key(UNMUTED_EVENT)] is False

    async def test_configured_ttl_is_applied(self, store, cache):
        await MuteSettingCache(store, cache, ttl=60).is_muted(MUTED_EVENT)

        assert cache.ttls[mute_cache_key(MUTED_EVENT)] == 60

    async def test_no_ttl_by_default(self, mute_cache, cache):
        await mute_cache.is_muted(MUTED_EVENT)

        assert cache.ttls[mute_cache_key(MUTED_EVENT)] is None


# ──────────────────────────────────────────────────────────────
# set_muted
# ──────────────────────────────────────────────────────────────


class TestSetMuted:
    """Tests for MuteSettingCache.set_muted."""

    async def test_writes_store_then_cache(self, mute_cache, store, cache):
        await mute_cache.set_muted(UNMUTED_EVENT, True)

        setting = await store.find_setting(UNMUTED_EVENT)
        assert setting.is_muted is True
        assert cache.data[mute_cache_key(UNMUTED_EVENT)] is True

    async def test_next_lookup_sees_new_value_regardless_of_prior_cache(self, mute_cache, cache):
        """Write-through: a previously cached False is replaced."""
        assert await mute_cache.is_muted(UNMUTED_EVENT) is False

        await mute_cache.set_muted(UNMUTED_EVENT, True)

        assert await mute_cache.is_muted(UNMUTED_EVENT) is True

    async def test_accepts_numeric_string_event_id(self, mute_cache, cache):
        await mute_cache.set_muted(str(MUTED_EVENT), False)

        assert cache.data[mute_cache_key(MUTED_EVENT)] is False

    @pytest.mark.parametrize("event_id", ["NaN", "abc", "0", "-1", 0, -5, 1.5, True, None])
    async def test_rejects_invalid_event_id(self, mute_cache, event_id):
        with pytest.raises(InvalidArgumentException):
            await mute_cache.set_muted(event_id, True)

    async def test_missing_setting_raises_not_found_without_writes(self, mute_cache, cache):
        with pytest.raises(NotFoundException):
            await mute_cache.set_muted(MISSING_EVENT, True)

        assert cache.set_calls == 0

    async def test_cache_failure_leaves_stale_entry_until_next_write(self, mute_cache, store, cache):
        """Store and cache writes are not atomic: the store may move ahead."""
        assert await mute_cache.is_muted(UNMUTED_EVENT) is False
        cache.fail_on_set = True

        with pytest.raises(ConnectionError):
            await mute_cache.set_muted(UNMUTED_EVENT, True)

        # Store has the new value, cache still serves the old one
        assert (await store.find_setting(UNMUTED_EVENT)).is_muted is True
        assert await mute_cache.is_muted(UNMUTED_EVENT) is False

        # Converges on the next successful write
        cache.fail_on_set = False
        await mute_cache.set_muted(UNMUTED_EVENT, True)
        assert await mute_cache.is_muted(UNMUTED_EVENT) is True

    async def test_stale_entry_converges_after_expiry(self, mute_cache, store, cache):
        """Once the stale entry is gone, the next miss refreshes from the store."""
        assert await mute_cache.is_muted(UNMUTED_EVENT) is False
        cache.fail_on_set = True
        with pytest.raises(ConnectionError):
            await mute_cache.set_muted(UNMUTED_EVENT, True)
        cache.fail_on_set = False

        cache.data.pop(mute_cache_key(UNMUTED_EVENT))

        assert await mute_cache.is_muted(UNMUTED_EVENT) is True

    async def test_breadcrumbs_follow_write_order(self, mute_cache, observability):
        await mute_cache.set_muted(MUTED_EVENT, False)

        assert observability.breadcrumb_messages == [
            "Mute setting updated in store",
            "Mute setting updated in cache",
        ]
