"""Secondary index over cached entities.

For an entity with id ``I`` registered with attributes ``{"name": "mocha"}``
the index maintains, all with the same ttl:

- ``I`` in the global id-set ``{ns}``
- ``I`` in ``{ns}:name:mocha``
- ``{ns}:name:mocha`` in the reverse registry ``{ns}:I:idx``

The reverse registry lets ``deregister`` find every secondary key of an id
without scanning the keyspace. There is no background sweep: expired
memberships simply stop being returned by the store.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from brewcache.cache.base import CacheStore
from brewcache.cache.keys import CacheKeys

logger = logging.getLogger(__name__)


class KeyIndex:
    """Maintains id-set, secondary and reverse keys with a shared lifetime."""

    def __init__(self, store: CacheStore, keys: CacheKeys):
        self.store = store
        self.keys = keys

    async def register(
        self, entity_id: str | int, attributes: Mapping[str, str], ttl: float
    ) -> None:
        """Index an id under each attribute value, refreshing every lifetime to ``ttl``.

        Re-registering the same id and attributes only refreshes lifetimes.
        """
        CacheStore.check_ttl(ttl)
        member = str(entity_id)
        reverse_key = self.keys.reverse(member)

        await self.store.add_member(self.keys.id_set(), member, ttl)
        for attribute, value in attributes.items():
            secondary_key = self.keys.secondary(attribute, value)
            # Reverse entry first so deregister can always find the membership
            await self.store.add_member(reverse_key, secondary_key, ttl)
            await self.store.add_member(secondary_key, member, ttl)

    async def resolve_by_secondary(self, attribute: str, value: str) -> set[str]:
        """Return the live ids carrying ``attribute == value``; empty on miss."""
        return await self.store.members(self.keys.secondary(attribute, value))

    async def deregister(self, entity_id: str | int) -> None:
        """Remove an id from every structure it was registered in.

        A reverse registry that already expired means the id is already
        deregistered; only the id-set membership is cleared in that case.
        """
        member = str(entity_id)
        reverse_key = self.keys.reverse(member)

        secondary_keys = await self.store.members(reverse_key)
        for secondary_key in secondary_keys:
            await self.store.remove_member(secondary_key, member)
        await self.store.remove_member(self.keys.id_set(), member)
        await self.store.delete(reverse_key)

        logger.debug(
            "Deregistered %s from %d secondary keys", self.keys.entity(member), len(secondary_keys)
        )

    async def unlink(self, entity_id: str | int, attribute: str, value: str) -> None:
        """Remove one secondary membership of an id, leaving its other entries alone."""
        member = str(entity_id)
        secondary_key = self.keys.secondary(attribute, value)
        await self.store.remove_member(secondary_key, member)
        await self.store.remove_member(self.keys.reverse(member), secondary_key)

    async def all_ids(self) -> set[str]:
        """Return every id with a live id-set membership."""
        return await self.store.members(self.keys.id_set())
