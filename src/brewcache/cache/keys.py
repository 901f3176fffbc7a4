"""Cache key schema.

Every key lives under a namespace (``coffee`` by default):

- ``{ns}``                      global id-set, one member per cached id
- ``{ns}:{id}``                 projection bytes for one entity
- ``{ns}:{attribute}:{value}``  secondary index, ids carrying that value
- ``{ns}:{id}:idx``             reverse registry, secondary keys of one id

Namespaces, attribute names and ids never contain ``:``; attribute
values may.
"""

from __future__ import annotations

REVERSE_SUFFIX = "idx"


def _check_segment(kind: str, value: str) -> str:
    if not value or ":" in value:
        raise ValueError(f"invalid {kind} for cache key: {value!r}")
    return value


class CacheKeys:
    """Cache key generator for one namespace."""

    def __init__(self, namespace: str = "coffee"):
        self.namespace = _check_segment("namespace", namespace)

    def id_set(self) -> str:
        """Key for the set of all cached ids."""
        return self.namespace

    def entity(self, entity_id: str | int) -> str:
        """Key for a cached projection."""
        return f"{self.namespace}:{_check_segment('id', str(entity_id))}"

    def secondary(self, attribute: str, value: str) -> str:
        """Key for the ids whose ``attribute`` equals ``value``."""
        return f"{self.namespace}:{_check_segment('attribute', attribute)}:{value}"

    def reverse(self, entity_id: str | int) -> str:
        """Key for the secondary keys registered for an id."""
        return f"{self.entity(entity_id)}:{REVERSE_SUFFIX}"
