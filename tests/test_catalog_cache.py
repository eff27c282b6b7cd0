"""Tests for the in-process catalog cache."""
import asyncio
import pytest
from distributor_search.services.catalog_cache import CatalogCache, CatalogSnapshot


class CountingLoader:
    def __init__(self, products=None, delay=0.0):
        self.products = products if products is not None else ["p1", "p2"]
        self.delay = delay
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return list(self.products)


@pytest.mark.asyncio
async def test_concurrent_first_requests_share_one_load():
    cache = CatalogCache()
    loader = CountingLoader(delay=0.05)

    results = await asyncio.gather(*(cache.get_or_load(loader) for _ in range(5)))

    assert loader.calls == 1
    assert all(r == ["p1", "p2"] for r in results)
    assert cache.get_stats()["loads"] == 1


@pytest.mark.asyncio
async def test_invalidate_forces_reload():
    cache = CatalogCache()
    loader = CountingLoader()

    await cache.get_or_load(loader)
    cache.invalidate()
    assert not cache.is_loaded
    await cache.get_or_load(loader)

    assert loader.calls == 2


@pytest.mark.asyncio
async def test_refresh_reloads_eagerly():
    cache = CatalogCache()
    loader = CountingLoader()

    await cache.get_or_load(loader)
    loader.products = ["p3"]
    products = await cache.refresh(loader)

    assert products == ["p3"]
    assert await cache.get_or_load(loader) == ["p3"]
    assert loader.calls == 2


@pytest.mark.asyncio
async def test_ttl_expires_snapshot():
    cache = CatalogCache(ttl=0.01)
    loader = CountingLoader()

    await cache.get_or_load(loader)
    await asyncio.sleep(0.03)
    await cache.get_or_load(loader)

    assert loader.calls == 2


@pytest.mark.asyncio
async def test_empty_catalog_is_still_cached():
    cache = CatalogCache()
    loader = CountingLoader(products=[])

    await cache.get_or_load(loader)
    await cache.get_or_load(loader)

    assert loader.calls == 1


@pytest.mark.asyncio
async def test_partial_snapshot_expires_after_partial_ttl():
    cache = CatalogCache(partial_ttl=0.01)
    calls = []

    async def loader():
        calls.append(1)
        return CatalogSnapshot(products=["p1"], failed_suppliers=["tarsus"])

    assert await cache.get_or_load(loader) == ["p1"]
    assert cache.is_loaded
    await asyncio.sleep(0.03)
    assert not cache.is_loaded
    await cache.get_or_load(loader)

    assert len(calls) == 2
    assert cache.get_stats()["partial_loads"] == 2


@pytest.mark.asyncio
async def test_complete_snapshot_is_kept_without_ttl():
    cache = CatalogCache(partial_ttl=0.01)
    loader = CountingLoader()

    async def complete_loader():
        return CatalogSnapshot(products=await loader())

    await cache.get_or_load(complete_loader)
    await asyncio.sleep(0.03)
    await cache.get_or_load(complete_loader)

    assert loader.calls == 1


@pytest.mark.asyncio
async def test_shorter_ttl_wins_over_partial_ttl():
    cache = CatalogCache(ttl=0.01, partial_ttl=60)

    async def loader():
        return CatalogSnapshot(products=[], failed_suppliers=["axiz"])

    await cache.get_or_load(loader)
    await asyncio.sleep(0.03)

    assert not cache.is_loaded
