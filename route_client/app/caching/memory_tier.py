"""
In-process memory cache tier.
"""

import threading
from collections import OrderedDict

from shared.errors import MemoryCacheMissError
from shared.logging import get_logger
from .entry import CacheEntry
from .tier import CacheTier


class MemoryTier(CacheTier):
    """Bounded LRU map of serialized cache entries.

    Capacity is best-effort: when ``max_entries`` or ``max_bytes`` is
    exceeded the least recently used entries are dropped, and a dropped entry
    is reported as a plain miss. A bound of 0 disables that bound.
    """

    name = "memory"

    def __init__(self, max_entries: int = 256, max_bytes: int = 0):
        self.max_entries = max_entries
        self.max_bytes = max_bytes
        self.logger = get_logger("route_client.cache.memory")

        self._store: "OrderedDict[str, bytes]" = OrderedDict()
        self._size = 0
        self._lock = threading.Lock()

    async def save(self, key: str, entry: CacheEntry) -> None:
        record = entry.to_bytes()

        with self._lock:
            previous = self._store.pop(key, None)
            if previous is not None:
                self._size -= len(previous)

            self._store[key] = record
            self._size += len(record)
            dropped = self._reclaim()

        if dropped:
            self.logger.debug("Memory cache reclaimed entries", dropped=dropped, size=self._size)

    async def get(self, key: str) -> CacheEntry:
        with self._lock:
            record = self._store.get(key)
            if record is None:
                raise MemoryCacheMissError(key)
            self._store.move_to_end(key)

        return CacheEntry.from_bytes(key, record)

    async def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._size = 0

    def __len__(self) -> int:
        return len(self._store)

    @property
    def size(self) -> int:
        """Total bytes held by serialized entries."""
        return self._size

    def _reclaim(self) -> int:
        # Caller holds the lock. The newest entry always survives.
        dropped = 0
        while len(self._store) > 1 and self._over_capacity():
            _, record = self._store.popitem(last=False)
            self._size -= len(record)
            dropped += 1
        return dropped

    def _over_capacity(self) -> bool:
        if self.max_entries and len(self._store) > self.max_entries:
            return True
        if self.max_bytes and self._size > self.max_bytes:
            return True
        return False
