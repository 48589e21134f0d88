"""Unit tests for the ReferenceDataService."""

import pytest

from product_console.application.interfaces import ReferenceDataProvider
from product_console.application.services import ListingCache, ReferenceDataService
from product_console.domain.entities import LoadStatus, ReferenceItem
from product_console.domain.exceptions import ReferenceDataError


class CountingProvider(ReferenceDataProvider):
    def __init__(self, failing: str | None = None):
        self.failing = failing
        self.calls: list[str] = []

    async def _list(self, resource: str) -> list[ReferenceItem]:
        self.calls.append(resource)
        if resource == self.failing:
            raise ReferenceDataError(resource, "HTTP 503")
        return [ReferenceItem(f"{resource}-1", resource.title())]

    async def list_categories(self) -> list[ReferenceItem]:
        return await self._list("categories")

    async def list_locations(self) -> list[ReferenceItem]:
        return await self._list("locations")

    async def list_suppliers(self) -> list[ReferenceItem]:
        return await self._list("suppliers")


@pytest.mark.asyncio
async def test_load_ready():
    data = await ReferenceDataService(CountingProvider()).load()

    assert data.status is LoadStatus.READY
    assert not data.is_blocking
    assert data.locations[0].id == "locations-1"
    assert data.suppliers[0].name == "Suppliers"


@pytest.mark.asyncio
async def test_any_failure_blocks():
    data = await ReferenceDataService(CountingProvider(failing="suppliers")).load()

    assert data.status is LoadStatus.ERROR
    assert data.is_blocking
    assert "suppliers" in data.error
    assert data.categories == []


@pytest.mark.asyncio
async def test_results_are_cached_across_loads():
    provider = CountingProvider()
    cache = ListingCache()

    await ReferenceDataService(provider, cache).load()
    await ReferenceDataService(provider, cache).load()

    assert sorted(provider.calls) == ["categories", "locations", "suppliers"]


@pytest.mark.asyncio
async def test_failed_lookup_is_not_cached():
    provider = CountingProvider(failing="locations")
    cache = ListingCache()

    await ReferenceDataService(provider, cache).load()
    provider.failing = None
    data = await ReferenceDataService(provider, cache).load()

    assert data.status is LoadStatus.READY
    assert provider.calls.count("locations") == 2
    assert provider.calls.count("categories") == 1


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_later_session_sees_new_supplier_once_cache_expires():
    provider = CountingProvider()
    clock = FakeClock()
    cache = ListingCache(ttl_seconds=60, clock=clock)

    first = await ReferenceDataService(provider, cache).load()

    async def with_new_supplier() -> list[ReferenceItem]:
        return [ReferenceItem("suppliers-1", "Suppliers"), ReferenceItem("suppliers-2", "Globex")]

    provider.list_suppliers = with_new_supplier

    clock.now = 30
    cached = await ReferenceDataService(provider, cache).load()
    clock.now = 61
    refreshed = await ReferenceDataService(provider, cache).load()

    assert [s.name for s in first.suppliers] == ["Suppliers"]
    assert [s.name for s in cached.suppliers] == ["Suppliers"]
    assert [s.name for s in refreshed.suppliers] == ["Suppliers", "Globex"]
    assert provider.calls.count("categories") == 2
