"""Service layer: the cache-aside coordinator."""

from brewcache.service.coordinator import CacheAsideCoordinator, LookupResult

__all__ = ["CacheAsideCoordinator", "LookupResult"]
