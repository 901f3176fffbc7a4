"""Repository pattern for coffee persistence.

``CoffeeRepository`` works on a caller-provided session. ``SqlPrimaryStore``
is the ``PrimaryStore`` the cache-aside layer talks to: it opens one short
session per lookup and maps connectivity failures to
``BackendUnavailable``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brewcache.core.model import Coffee
from brewcache.core.money import Money
from brewcache.errors import BackendUnavailable
from brewcache.persistence.base import PrimaryStore
from brewcache.persistence.tables import CoffeeTable

logger = logging.getLogger(__name__)

# Sample menu seeded by ``brewcache init-db`` (prices in TWD minor units)
MENU: Sequence[tuple[str, int]] = (
    ("espresso", 10000),
    ("latte", 12500),
    ("capuccino", 12500),
    ("mocha", 15000),
    ("macchiato", 15000),
)


def _to_entity(row: CoffeeTable) -> Coffee:
    return Coffee(
        id=row.id,
        name=row.name,
        price=row.price,
        create_time=row.create_time,
        update_time=row.update_time,
    )


class CoffeeRepository:
    """Repository for coffee rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_name(self, name: str) -> Coffee | None:
        stmt = select(CoffeeTable).where(CoffeeTable.name == name)
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return _to_entity(row) if row is not None else None

    async def list_all(self) -> list[Coffee]:
        stmt = select(CoffeeTable).order_by(CoffeeTable.id)
        rows = (await self.session.execute(stmt)).scalars().all()
        return [_to_entity(row) for row in rows]

    async def add(self, name: str, price: Money | None) -> Coffee:
        """Insert a coffee and return it with its database-assigned fields."""
        row = CoffeeTable(name=name, price=price)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return _to_entity(row)


async def seed_menu(session: AsyncSession, currency: str) -> int:
    """Insert the sample menu entries that do not exist yet.

    Returns:
        Number of coffees inserted.
    """
    repo = CoffeeRepository(session)
    inserted = 0
    for name, minor in MENU:
        if await repo.find_by_name(name) is None:
            await repo.add(name, Money.of_minor(currency, minor))
            inserted += 1
    logger.info("Seeded %d coffees", inserted)
    return inserted


class SqlPrimaryStore(PrimaryStore):
    """Primary store backed by the relational database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find(self, name: str) -> Coffee | None:
        try:
            async with self.session_factory() as session:
                return await CoffeeRepository(session).find_by_name(name)
        except (OperationalError, InterfaceError, OSError) as exc:
            raise BackendUnavailable("primary", f"lookup of {name!r} failed: {exc}") from exc
