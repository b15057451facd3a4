"""
Two-tier cache coordinator.
"""

import asyncio
from typing import TYPE_CHECKING, List, Optional

from shared.errors import CacheClearError, CacheMissError
from shared.logging import get_logger
from .entry import CacheEntry
from .tier import CacheTier

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class CacheCoordinator:
    """Present the memory and disk tiers as one logical cache.

    Reads go memory first, then disk. Writes are best-effort: a tier that
    fails to store an entry is logged and skipped, and ``save`` reports
    whether every attempted tier succeeded.
    """

    def __init__(
        self,
        memory: CacheTier,
        disk: CacheTier,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.memory = memory
        self.disk = disk
        self.metrics = metrics
        self.logger = get_logger("route_client.cache.coordinator")

    async def get(self, key: str, disk_enabled: bool) -> CacheEntry:
        """Return the entry for ``key``, promoting disk hits into memory."""
        try:
            entry = await self.memory.get(key)
        except CacheMissError as memory_miss:
            self._record("cache_misses_total", self.memory.name)
            if not disk_enabled:
                raise

            try:
                entry = await self.disk.get(key)
            except CacheMissError as disk_miss:
                self._record("cache_misses_total", self.disk.name)
                raise memory_miss from disk_miss

            self._record("cache_hits_total", self.disk.name)
            try:
                await self.memory.save(key, entry)
            except Exception as exc:
                self.logger.warning("Failed to promote disk cache entry into memory", key=key, error=str(exc))
            return entry

        self._record("cache_hits_total", self.memory.name)
        return entry

    async def save(self, key: str, entry: CacheEntry, disk_enabled: bool) -> bool:
        """Store ``entry`` in memory, and on disk when enabled."""
        stored = True

        try:
            await self.memory.save(key, entry)
        except Exception as exc:
            stored = False
            self.logger.error("Failed to save memory cache entry", key=key, error=str(exc))

        if disk_enabled:
            try:
                await self.disk.save(key, entry)
            except Exception as exc:
                stored = False
                self.logger.error("Failed to save disk cache entry", key=key, error=str(exc))

        return stored

    async def clear(self) -> None:
        """Clear both tiers concurrently; raise after both finish if either failed."""
        results = await asyncio.gather(
            self.memory.clear(),
            self.disk.clear(),
            return_exceptions=True
        )

        errors: List[BaseException] = [result for result in results if isinstance(result, BaseException)]
        for tier, result in zip((self.memory, self.disk), results):
            if isinstance(result, BaseException):
                self.logger.error("Cache tier clear failed", tier=tier.name, error=str(result))

        if errors:
            raise CacheClearError(errors)

        self.logger.info("Cache cleared", tiers=[self.memory.name, self.disk.name])

    def _record(self, metric_name: str, tier: str) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.increment_counter(metric_name, tier=tier)
        except Exception as exc:  # pragma: no cover - metrics failures should never break caching
            self.logger.debug("Failed to record cache metrics", error=str(exc))
