"""Process wiring.

Builds the cache-aside stack in dependency order, leaves first:
primary store, cache store, key index, coordinator.

Usage:
    async with open_service() as service:
        coffee = await service.find_by_name("mocha")
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from brewcache.cache.base import CacheStore
from brewcache.cache.index import KeyIndex
from brewcache.cache.keys import CacheKeys
from brewcache.cache.memory import MemoryCacheStore
from brewcache.cache.redis import RedisCacheStore, close_redis, get_redis
from brewcache.config import Settings
from brewcache.config import settings as default_settings
from brewcache.core.codec import MoneyCodec, ProjectionCodec
from brewcache.persistence.db import create_engine, create_session_factory
from brewcache.persistence.repositories import SqlPrimaryStore
from brewcache.persistence.tables import check_currency
from brewcache.service.coordinator import CacheAsideCoordinator

logger = logging.getLogger(__name__)


async def create_cache_store(config: Settings) -> CacheStore:
    if config.cache_backend == "memory":
        return MemoryCacheStore()
    return RedisCacheStore(await get_redis(config.redis_url))


@asynccontextmanager
async def open_service(config: Settings | None = None) -> AsyncIterator[CacheAsideCoordinator]:
    """Construct a coordinator and close its backends on exit.

    Raises:
        ConfigurationError: If the cache currency differs from the price column.
    """
    config = config or default_settings
    check_currency(config.currency)

    engine = create_engine(config.database_url, echo=config.db_echo, config=config)
    primary = SqlPrimaryStore(create_session_factory(engine))
    store = await create_cache_store(config)
    index = KeyIndex(store, CacheKeys(config.cache_namespace))
    codec = ProjectionCodec(MoneyCodec(config.currency))

    logger.info(
        "Cache-aside service ready (backend=%s, namespace=%s, ttl=%ss)",
        config.cache_backend,
        config.cache_namespace,
        config.cache_ttl,
    )
    try:
        yield CacheAsideCoordinator(primary, store, index, codec, ttl=config.cache_ttl)
    finally:
        await store.close()
        await primary.close()
        if config.cache_backend == "redis":
            await close_redis()
        await engine.dispose()
