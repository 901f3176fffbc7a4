"""Persistence layer for brewcache.

The relational database is the source of truth. The cache-aside layer
only sees it through ``PrimaryStore.find``.
"""

from brewcache.persistence.base import PrimaryStore
from brewcache.persistence.repositories import CoffeeRepository, SqlPrimaryStore, seed_menu
from brewcache.persistence.tables import Base, CoffeeTable, MoneyType, check_currency

__all__ = [
    "Base",
    "CoffeeRepository",
    "CoffeeTable",
    "MoneyType",
    "check_currency",
    "PrimaryStore",
    "SqlPrimaryStore",
    "seed_menu",
]
