"""Domain types and codecs shared by the cache and persistence layers."""

from brewcache.core.codec import ABSENT, MoneyCodec, ProjectionCodec
from brewcache.core.model import Coffee, CoffeeProjection
from brewcache.core.money import Money

__all__ = [
    "ABSENT",
    "Coffee",
    "CoffeeProjection",
    "Money",
    "MoneyCodec",
    "ProjectionCodec",
]
