"""Unit tests for the page cache and its backends."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from companion_service.infrastructure.cache.cache import InMemoryCache, RedisCache, build_cache
from companion_service.infrastructure.cache.invalidation import PageCache


@pytest.mark.unit
class TestPageCache:

    async def test_read_through_roundtrip(self, page_cache: PageCache):
        assert await page_cache.get("/companions", "page=1") is None

        await page_cache.set("/companions", "page=1", {"items": [1]})

        assert await page_cache.get("/companions", "page=1") == {"items": [1]}

    async def test_invalidate_drops_every_query_variant(self, page_cache: PageCache):
        await page_cache.set("/companions", "page=1", {"items": [1]})
        await page_cache.set("/companions", "page=2&subject=maths", {"items": [2]})
        await page_cache.set("/my-journey", "", {"items": [3]})

        removed = await page_cache.invalidate("/companions")

        assert removed == 2
        assert await page_cache.get("/companions", "page=1") is None
        assert await page_cache.get("/companions", "page=2&subject=maths") is None
        assert await page_cache.get("/my-journey", "") == {"items": [3]}

    async def test_invalidate_does_not_touch_longer_paths(self, page_cache: PageCache):
        await page_cache.set("/companions/abc", "", {"id": "abc"})

        assert await page_cache.invalidate("/companions") == 0
        assert await page_cache.get("/companions/abc", "") == {"id": "abc"}

    async def test_invalidate_unknown_path(self, page_cache: PageCache):
        assert await page_cache.invalidate("/nothing-cached") == 0

    def test_key_format(self, page_cache: PageCache):
        assert page_cache.key("/companions", "limit=10&page=1") == "page:/companions|limit=10&page=1"


@pytest.mark.unit
class TestInMemoryCache:

    async def test_expired_entries_are_misses(self, monkeypatch):
        cache = InMemoryCache()
        clock = {"now": 1000.0}
        monkeypatch.setattr("companion_service.infrastructure.cache.cache.time.time", lambda: clock["now"])

        await cache.set("k", "v", ttl=10)
        assert await cache.get("k") == "v"

        clock["now"] += 11
        assert await cache.get("k") is None

    async def test_lru_eviction(self):
        cache = InMemoryCache(max_size=2)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.get("a")
        await cache.set("c", 3)

        assert await cache.get("a") == 1
        assert await cache.get("b") is None
        assert cache.size() == 2

    async def test_namespace_isolation(self):
        first = InMemoryCache(namespace="one")
        await first.set("page:/x|", 1)

        assert await first.delete_prefix("page:/x|") == 1
        assert await first.delete("page:/x|") is False


@pytest.mark.unit
class TestRedisCache:

    async def test_delete_prefix_escapes_glob_characters(self):
        manager = MagicMock()
        manager.delete_by_pattern = AsyncMock(return_value=3)
        cache = RedisCache(manager, namespace="svc")

        removed = await cache.delete_prefix("page:/companions?[x]|")

        assert removed == 3
        manager.delete_by_pattern.assert_awaited_once_with(r"svc:page:/companions\?\[x\]|*")

    async def test_values_are_json(self):
        client = MagicMock()
        client.get = AsyncMock(return_value='{"items": []}')
        client.setex = AsyncMock()
        manager = MagicMock()
        manager.get_client.return_value = client
        cache = RedisCache(manager)

        assert await cache.set("k", {"items": []}, ttl=60) is True
        client.setex.assert_awaited_once_with("k", 60, '{"items": []}')
        assert await cache.get("k") == {"items": []}

    async def test_no_client_is_a_miss(self):
        manager = MagicMock()
        manager.get_client.return_value = None
        cache = RedisCache(manager)

        assert await cache.get("k") is None
        assert await cache.set("k", 1) is False


@pytest.mark.unit
def test_build_cache_falls_back_to_memory():
    manager = MagicMock()
    manager.is_available = False
    assert isinstance(build_cache(manager), InMemoryCache)
    assert isinstance(build_cache(None), InMemoryCache)

    manager.is_available = True
    assert isinstance(build_cache(manager), RedisCache)
