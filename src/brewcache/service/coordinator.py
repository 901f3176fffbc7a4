"""Cache-aside coordination for coffee lookups.

Read path for ``find_by_name("mocha")``:

1. Resolve ``coffee:name:mocha`` to ids through the KeyIndex
2. Hit: read ``coffee:{id}``, decode the projection, return it
3. Miss (no id, or the entry expired under the index): ask the primary store
4. Primary hit: write the projection, then register the index, both with
   the same ttl, and return the full primary record

Data is always written before the index. A crash or cancellation between
the two leaves at worst an orphan index entry, which the next lookup
treats as a miss and repairs by repopulating.

There is no locking. Concurrent misses for one name each read the primary
store and write identical cache content; the last write wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from brewcache.cache.base import CacheStore
from brewcache.cache.index import KeyIndex
from brewcache.cache.keys import CacheKeys
from brewcache.core.codec import ProjectionCodec
from brewcache.core.model import Coffee, CoffeeProjection
from brewcache.observability.metrics import MetricsRegistry, get_metrics
from brewcache.persistence.base import PrimaryStore

logger = logging.getLogger(__name__)

NAME_ATTRIBUTE = "name"


def _id_order(coffee_id: str) -> tuple[int, int, str]:
    # Numeric ids by value, anything else after them by text
    if coffee_id.isdigit():
        return (0, len(coffee_id.lstrip("0")), coffee_id.lstrip("0"))
    return (1, 0, coffee_id)


Source = Literal["cache", "primary"]


@dataclass(frozen=True, slots=True)
class LookupResult:
    """A coffee together with where it was read from."""

    coffee: Coffee
    source: Source

    @property
    def from_cache(self) -> bool:
        return self.source == "cache"


class CacheAsideCoordinator:
    """Read-through lookups of coffees by name."""

    def __init__(
        self,
        primary: PrimaryStore,
        store: CacheStore,
        index: KeyIndex,
        codec: ProjectionCodec,
        ttl: float,
        metrics: MetricsRegistry | None = None,
    ):
        self.primary = primary
        self.store = store
        self.index = index
        self.codec = codec
        self.ttl = CacheStore.check_ttl(ttl)
        self.metrics = metrics or get_metrics()

    @property
    def keys(self) -> CacheKeys:
        return self.index.keys

    async def find_by_name(self, name: str) -> Coffee | None:
        """Find a coffee by name, reading through the cache.

        The first lookup returns the full primary record. Lookups served
        from the cache carry only id, name and price; their timestamps are
        None.

        Raises:
            DecodeError: If the cached entry is corrupt.
            BackendUnavailable: If the cache or the primary store is down.
        """
        result = await self.lookup(name)
        return result.coffee if result is not None else None

    async def lookup(self, name: str) -> LookupResult | None:
        """Like ``find_by_name`` but also reports where the coffee came from."""
        namespace = self.keys.namespace

        with self.metrics.time("lookup", namespace):
            cached = await self._read_cache(name)
            if cached is not None:
                self.metrics.cache_hits_total.labels(cache_type=namespace).inc()
                return LookupResult(coffee=cached.to_entity(), source="cache")

            self.metrics.cache_misses_total.labels(cache_type=namespace).inc()
            coffee = await self.primary.find(name)
            self.metrics.primary_reads_total.labels(
                cache_type=namespace, found=str(coffee is not None).lower()
            ).inc()
            if coffee is None:
                logger.debug("No coffee named %r in the primary store", name)
                return None

            await self._populate(coffee)
            return LookupResult(coffee=coffee, source="primary")

    async def invalidate(self, coffee_id: int | str) -> bool:
        """Drop a cached coffee and its index entries.

        Returns:
            True if a cached projection existed.
        """
        existed = await self.store.delete(self.keys.entity(coffee_id))
        await self.index.deregister(coffee_id)
        logger.info("Invalidated %s (cached=%s)", self.keys.entity(coffee_id), existed)
        return existed

    async def invalidate_by_name(self, name: str) -> int:
        """Invalidate every cached coffee indexed under ``name``.

        Returns:
            Number of cached projections removed.
        """
        removed = 0
        for coffee_id in sorted(await self.index.resolve_by_secondary(NAME_ATTRIBUTE, name)):
            if await self.invalidate(coffee_id):
                removed += 1
        return removed

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _read_cache(self, name: str) -> CoffeeProjection | None:
        ids = await self.index.resolve_by_secondary(NAME_ATTRIBUTE, name)
        if not ids:
            return None

        ordered = sorted(ids, key=_id_order)
        if len(ordered) > 1:
            logger.warning(
                "Index %s holds %d ids %s; using %s",
                self.keys.secondary(NAME_ATTRIBUTE, name),
                len(ordered),
                ordered,
                ordered[0],
            )

        data = await self.store.get(self.keys.entity(ordered[0]))
        if data is None:
            logger.debug("Orphan index entry %s -> %s", name, self.keys.entity(ordered[0]))
            return None

        projection = self.codec.decode(data)
        if projection.name != name:
            # Index entry left over from a previous name of this id
            logger.debug("Stale index entry %s -> %s", name, projection.name)
            await self.index.unlink(ordered[0], NAME_ATTRIBUTE, name)
            return None
        return projection

    async def _populate(self, coffee: Coffee) -> None:
        projection = CoffeeProjection.from_entity(coffee)
        await self.store.put_with_ttl(
            self.keys.entity(coffee.id), self.codec.encode(projection), self.ttl
        )
        await self.index.register(coffee.id, {NAME_ATTRIBUTE: coffee.name}, self.ttl)
        self.metrics.cache_populations_total.labels(cache_type=self.keys.namespace).inc()
        logger.debug("Cached %s for %ss", self.keys.entity(coffee.id), self.ttl)
