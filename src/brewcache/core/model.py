"""Coffee entity and the narrower projection kept in the cache.

The primary store owns ``Coffee`` including its bookkeeping timestamps.
The cache only ever holds a ``CoffeeProjection`` (id, name, price); a
coffee rebuilt from the cache therefore has no timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from brewcache.core.money import Money


@dataclass(frozen=True, slots=True)
class Coffee:
    """Full coffee record as returned by the primary store."""

    id: int
    name: str
    price: Money | None
    create_time: datetime | None = None
    update_time: datetime | None = None


@dataclass(frozen=True, slots=True)
class CoffeeProjection:
    """Cached subset of a coffee."""

    id: int
    name: str
    price: Money | None

    @classmethod
    def from_entity(cls, coffee: Coffee) -> CoffeeProjection:
        return cls(id=coffee.id, name=coffee.name, price=coffee.price)

    def to_entity(self) -> Coffee:
        """Coffee-shaped view of the projection; bookkeeping fields stay None."""
        return Coffee(id=self.id, name=self.name, price=self.price)
