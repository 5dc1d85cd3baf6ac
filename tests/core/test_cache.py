# tests/core/test_cache.py
from __future__ import annotations

import asyncio

import pytest

from drupal.jsonapi.core.cache import ResolverCache


class TestResolverCache:
    def test_set_get_has(self):
        cache = ResolverCache()
        assert cache.has("/a") is False
        assert cache.get("/a") is None

        cache.set("/a", {"x": 1})

        assert cache.has("/a") is True
        assert cache.get("/a") == {"x": 1}
        assert "/a" in cache
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_fetch_or_join_caches_result(self):
        cache = ResolverCache()
        calls = []

        async def producer():
            calls.append(1)
            return "value"

        assert await cache.fetch_or_join("/a", producer) == "value"
        assert await cache.fetch_or_join("/a", producer) == "value"
        assert calls == [1]
        assert cache.get("/a") == "value"

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_producer(self):
        cache = ResolverCache()
        calls = []
        release = asyncio.Event()

        async def producer():
            calls.append(1)
            await release.wait()
            return object()

        tasks = [asyncio.ensure_future(cache.fetch_or_join("/a", producer)) for _ in range(5)]
        await asyncio.sleep(0)
        assert cache.is_pending("/a")
        assert cache.was_traversed("/a")

        release.set()
        results = await asyncio.gather(*tasks)

        assert calls == [1]
        assert all(r is results[0] for r in results)
        assert not cache.is_pending("/a")
        assert cache.has("/a")

    @pytest.mark.asyncio
    async def test_failed_producer_is_not_cached(self):
        cache = ResolverCache()

        async def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await cache.fetch_or_join("/a", failing)

        assert not cache.was_traversed("/a")

        async def working():
            return 1

        assert await cache.fetch_or_join("/a", working) == 1

    def test_items_snapshot(self):
        cache = ResolverCache()
        cache.set("/a", 1)
        cache.set("/b", 2)

        assert dict(cache.items()) == {"/a": 1, "/b": 2}
