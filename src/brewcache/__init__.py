"""brewcache: read-through cache-aside lookups for a coffee menu.

Coffees live in a relational database and are cached in Redis (or an
in-process store) as a narrow projection with a secondary index by name.
"""

__version__ = "0.1.0"
