"""Primary store interface.

The cache-aside layer needs exactly one capability from the durable
store: look an entity up by its natural key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from brewcache.core.model import Coffee


class PrimaryStore(ABC):
    """Abstract source of truth for coffees."""

    @abstractmethod
    async def find(self, name: str) -> Coffee | None:
        """Find a coffee by name.

        Returns:
            The full coffee record, or None if no coffee has that name.

        Raises:
            BackendUnavailable: If the store cannot be reached.
        """
        ...

    async def close(self) -> None:
        """Release store resources."""
        return None
