"""
Cache tier interface.
"""

from abc import ABC, abstractmethod

from .entry import CacheEntry


class CacheTier(ABC):
    """One storage backend in the cache hierarchy.

    Keys are opaque strings (the resolved request URL). Implementations must
    tolerate concurrent calls from several orchestrations.
    """

    name: str = "tier"

    @abstractmethod
    async def save(self, key: str, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key``, replacing any previous entry."""

    @abstractmethod
    async def get(self, key: str) -> CacheEntry:
        """Return the entry for ``key`` or raise a ``CacheMissError``."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""
