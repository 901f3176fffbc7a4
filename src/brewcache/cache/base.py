"""Base cache store interface.

Defines the abstract key-value backend the cache-aside layer runs on.
Backends only guarantee single-key atomicity; consistency across keys is
the job of ``KeyIndex``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CacheStore(ABC):
    """Abstract base class for cache backends with per-key expiration.

    A missing or expired key is reported as ``None``/``False``. Backend
    failures raise ``BackendUnavailable`` and are never reported as a miss.
    """

    # -------------------------------------------------------------------------
    # Plain values
    # -------------------------------------------------------------------------

    @abstractmethod
    async def put_with_ttl(self, key: str, value: bytes, ttl: float) -> None:
        """Store a value that expires after ``ttl`` seconds."""
        ...

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Get a value. Returns None when absent or expired."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether a live key exists."""
        ...

    # -------------------------------------------------------------------------
    # Member sets (each member expires on its own deadline)
    # -------------------------------------------------------------------------

    @abstractmethod
    async def add_member(self, key: str, member: str, ttl: float) -> None:
        """Add or refresh a set member that expires after ``ttl`` seconds.

        Expired members are pruned and the set key's own expiry is
        refreshed to ``ttl``.
        """
        ...

    @abstractmethod
    async def members(self, key: str) -> set[str]:
        """Return the live members of a set (empty if absent)."""
        ...

    @abstractmethod
    async def remove_member(self, key: str, member: str) -> bool:
        """Remove a member. Returns True if it was present."""
        ...

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def ping(self) -> bool:
        """Check backend connectivity."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
        return None

    @staticmethod
    def check_ttl(ttl: float) -> float:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        return ttl
