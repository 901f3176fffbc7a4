"""In-process cache store.

Keeps values and member sets in dictionaries together with their
deadlines. Expiration is passive: an entry past its deadline is dropped
the next time it is touched. The clock is injectable so tests can move
time forward without sleeping.

Example:
    store = MemoryCacheStore()
    await store.put_with_ttl("coffee:4", b"...", ttl=60)
"""

from __future__ import annotations

import fnmatch
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from brewcache.cache.base import CacheStore


@dataclass
class _Value:
    data: bytes
    deadline: float


@dataclass
class _MemberSet:
    deadline: float
    members: dict[str, float] = field(default_factory=dict)


class MemoryCacheStore(CacheStore):
    """Dictionary-backed cache store for single-process use and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._values: dict[str, _Value] = {}
        self._sets: dict[str, _MemberSet] = {}

    def _live_value(self, key: str) -> _Value | None:
        entry = self._values.get(key)
        if entry is not None and entry.deadline <= self._clock():
            del self._values[key]
            return None
        return entry

    def _live_set(self, key: str) -> _MemberSet | None:
        entry = self._sets.get(key)
        if entry is None:
            return None
        now = self._clock()
        if entry.deadline <= now:
            del self._sets[key]
            return None
        for member, deadline in list(entry.members.items()):
            if deadline <= now:
                del entry.members[member]
        if not entry.members:
            del self._sets[key]
            return None
        return entry

    # -------------------------------------------------------------------------
    # Plain values
    # -------------------------------------------------------------------------

    async def put_with_ttl(self, key: str, value: bytes, ttl: float) -> None:
        self.check_ttl(ttl)
        self._sets.pop(key, None)
        self._values[key] = _Value(data=bytes(value), deadline=self._clock() + ttl)

    async def get(self, key: str) -> bytes | None:
        entry = self._live_value(key)
        return entry.data if entry is not None else None

    async def delete(self, key: str) -> bool:
        existed = self._live_value(key) is not None or self._live_set(key) is not None
        self._values.pop(key, None)
        self._sets.pop(key, None)
        return existed

    async def exists(self, key: str) -> bool:
        return self._live_value(key) is not None or self._live_set(key) is not None

    # -------------------------------------------------------------------------
    # Member sets
    # -------------------------------------------------------------------------

    async def add_member(self, key: str, member: str, ttl: float) -> None:
        self.check_ttl(ttl)
        deadline = self._clock() + ttl
        self._values.pop(key, None)
        entry = self._live_set(key)
        if entry is None:
            entry = self._sets[key] = _MemberSet(deadline=deadline)
        entry.members[member] = deadline
        entry.deadline = deadline

    async def members(self, key: str) -> set[str]:
        entry = self._live_set(key)
        return set(entry.members) if entry is not None else set()

    async def remove_member(self, key: str, member: str) -> bool:
        entry = self._live_set(key)
        if entry is None or member not in entry.members:
            return False
        del entry.members[member]
        if not entry.members:
            del self._sets[key]
        return True

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def keys(self, pattern: str = "*") -> list[str]:
        """Live keys matching a glob pattern, sorted."""
        live = [k for k in list(self._values) if self._live_value(k) is not None]
        live += [k for k in list(self._sets) if self._live_set(k) is not None]
        return sorted(k for k in live if fnmatch.fnmatch(k, pattern))
