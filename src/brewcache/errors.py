"""Error taxonomy for the cache-aside layer.

"Not found" is never an exception: lookups return ``None``. Only genuine
failures are raised:

- DecodeError: cached bytes could not be turned back into a value
- BackendUnavailable: the cache or the primary store could not be reached
- ConfigurationError: settings disagree with each other or with the schema
"""

from __future__ import annotations

from typing import Literal

Backend = Literal["cache", "primary"]


class BrewCacheError(Exception):
    """Base class for all brewcache errors."""


class DecodeError(BrewCacheError, ValueError):
    """Raised when cached bytes are malformed, empty or of the wrong shape."""


class ConfigurationError(BrewCacheError, ValueError):
    """Raised when settings cannot be used together."""


class BackendUnavailable(BrewCacheError):
    """Raised when a backend call fails for a reason other than a missing key."""

    def __init__(self, backend: Backend, message: str):
        super().__init__(f"{backend} backend unavailable: {message}")
        self.backend = backend
