"""Global pytest configuration and fixtures.

Provides a controllable clock, an in-process cache stack and a
dictionary-backed primary store whose availability can be switched off.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from brewcache.cache.index import KeyIndex
from brewcache.cache.keys import CacheKeys
from brewcache.cache.memory import MemoryCacheStore
from brewcache.core.codec import MoneyCodec, ProjectionCodec
from brewcache.core.model import Coffee
from brewcache.core.money import Money
from brewcache.errors import BackendUnavailable
from brewcache.observability.metrics import MetricsRegistry
from brewcache.persistence.base import PrimaryStore
from brewcache.service.coordinator import CacheAsideCoordinator

TTL = 60.0


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePrimaryStore(PrimaryStore):
    """Primary store over a dict of coffees keyed by name."""

    def __init__(self, coffees: list[Coffee] | None = None) -> None:
        self.coffees = {c.name: c for c in coffees or []}
        self.calls: list[str] = []
        self.available = True

    async def find(self, name: str) -> Coffee | None:
        self.calls.append(name)
        # Yield so concurrent lookups interleave like real I/O
        await asyncio.sleep(0)
        if not self.available:
            raise BackendUnavailable("primary", "store switched off")
        return self.coffees.get(name)


def make_mocha() -> Coffee:
    stamp = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
    return Coffee(
        id=4,
        name="mocha",
        price=Money.of_minor("TWD", 15000),
        create_time=stamp,
        update_time=stamp,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def keys() -> CacheKeys:
    return CacheKeys("ns")


@pytest.fixture
def index(store: MemoryCacheStore, keys: CacheKeys) -> KeyIndex:
    return KeyIndex(store, keys)


@pytest.fixture
def codec() -> ProjectionCodec:
    return ProjectionCodec(MoneyCodec("TWD"))


@pytest.fixture
def mocha() -> Coffee:
    return make_mocha()


@pytest.fixture
def primary(mocha: Coffee) -> FakePrimaryStore:
    latte = Coffee(id=2, name="latte", price=Money.of_minor("TWD", 12500))
    return FakePrimaryStore([mocha, latte])


@pytest.fixture
def metrics() -> MetricsRegistry:
    registry = MetricsRegistry(enabled=False)
    registry.initialize()
    return registry


@pytest.fixture
def coordinator(
    primary: FakePrimaryStore,
    store: MemoryCacheStore,
    index: KeyIndex,
    codec: ProjectionCodec,
    metrics: MetricsRegistry,
) -> CacheAsideCoordinator:
    return CacheAsideCoordinator(primary, store, index, codec, ttl=TTL, metrics=metrics)
