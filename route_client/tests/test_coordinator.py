"""
Unit tests for the two-tier cache coordinator.
"""

import pytest
from prometheus_client import CollectorRegistry
from unittest.mock import AsyncMock, patch

from route_client.app.caching.coordinator import CacheCoordinator
from route_client.app.caching.disk_tier import DiskTier
from route_client.app.caching.entry import CacheEntry
from route_client.app.caching.memory_tier import MemoryTier
from shared.errors import (
    CacheClearError,
    CacheMissError,
    DiskCacheMissError,
    DiskClearError,
    MemoryCacheMissError,
)
from shared.metrics import MetricsCollector


class TestCacheCoordinator:
    """Test cases for CacheCoordinator."""

    @pytest.fixture
    def registry(self):
        return CollectorRegistry()

    @pytest.fixture
    def memory(self):
        return MemoryTier()

    @pytest.fixture
    def disk(self, tmp_path):
        return DiskTier(tmp_path / "cache")

    @pytest.fixture
    def coordinator(self, memory, disk, registry):
        """Create a coordinator over real tiers."""
        return CacheCoordinator(memory, disk, metrics=MetricsCollector(registry=registry))

    @pytest.mark.asyncio
    async def test_save_writes_both_tiers(self, coordinator, memory, disk):
        """Test saving with the disk tier enabled."""
        stored = await coordinator.save("k", CacheEntry(b"payload", "v1"), disk_enabled=True)

        assert stored is True
        assert (await memory.get("k")).payload == b"payload"
        assert (await disk.get("k")).payload == b"payload"

    @pytest.mark.asyncio
    async def test_save_without_disk_skips_disk(self, coordinator, memory, disk):
        """Test saving with the disk tier disabled."""
        await coordinator.save("k", CacheEntry(b"payload", "v1"), disk_enabled=False)

        assert (await memory.get("k")).payload == b"payload"
        with pytest.raises(DiskCacheMissError):
            await disk.get("k")

    @pytest.mark.asyncio
    async def test_memory_hit(self, coordinator, registry):
        """Test that a memory hit never reaches disk."""
        await coordinator.save("k", CacheEntry(b"payload"), disk_enabled=False)

        with patch.object(coordinator.disk, "get", new_callable=AsyncMock) as mock_disk_get:
            entry = await coordinator.get("k", disk_enabled=True)

        assert entry.payload == b"payload"
        mock_disk_get.assert_not_called()
        assert registry.get_sample_value("cache_hits_total", {"tier": "memory"}) == 1.0

    @pytest.mark.asyncio
    async def test_disk_hit_is_promoted_to_memory(self, coordinator, memory, disk, registry):
        """Test promotion of a disk hit into the memory tier."""
        await disk.save("k", CacheEntry(b"from-disk", "v1"))

        entry = await coordinator.get("k", disk_enabled=True)

        assert entry == CacheEntry(b"from-disk", "v1")
        assert (await memory.get("k")) == CacheEntry(b"from-disk", "v1")
        assert registry.get_sample_value("cache_misses_total", {"tier": "memory"}) == 1.0
        assert registry.get_sample_value("cache_hits_total", {"tier": "disk"}) == 1.0

    @pytest.mark.asyncio
    async def test_disk_not_consulted_when_disabled(self, coordinator, disk):
        """Test that a memory miss is final when disk caching is off."""
        await disk.save("k", CacheEntry(b"from-disk"))

        with pytest.raises(MemoryCacheMissError):
            await coordinator.get("k", disk_enabled=False)

    @pytest.mark.asyncio
    async def test_miss_in_both_tiers(self, coordinator):
        """Test that a total miss surfaces the memory miss."""
        with pytest.raises(MemoryCacheMissError) as exc_info:
            await coordinator.get("k", disk_enabled=True)

        assert isinstance(exc_info.value.__cause__, DiskCacheMissError)

    @pytest.mark.asyncio
    async def test_promotion_failure_still_returns_entry(self, coordinator, disk):
        """Test that a failed promotion is only logged."""
        await disk.save("k", CacheEntry(b"from-disk"))

        with patch.object(coordinator.memory, "save", new_callable=AsyncMock) as mock_save:
            mock_save.side_effect = RuntimeError("memory full")
            entry = await coordinator.get("k", disk_enabled=True)

        assert entry.payload == b"from-disk"

    @pytest.mark.asyncio
    async def test_save_failures_are_best_effort(self, coordinator, memory):
        """Test that a failing tier does not stop the other one."""
        with patch.object(coordinator.disk, "save", new_callable=AsyncMock) as mock_save:
            mock_save.side_effect = OSError("read-only file system")
            stored = await coordinator.save("k", CacheEntry(b"payload"), disk_enabled=True)

        assert stored is False
        assert (await memory.get("k")).payload == b"payload"

    @pytest.mark.asyncio
    async def test_clear_empties_both_tiers(self, coordinator, memory, disk):
        """Test clearing both tiers."""
        await coordinator.save("k", CacheEntry(b"payload"), disk_enabled=True)

        await coordinator.clear()

        with pytest.raises(CacheMissError):
            await coordinator.get("k", disk_enabled=True)
        assert not disk.directory.exists()

    @pytest.mark.asyncio
    async def test_clear_failure_still_clears_other_tier(self, coordinator, memory):
        """Test that one failing tier does not prevent clearing the other."""
        await coordinator.save("k", CacheEntry(b"payload"), disk_enabled=False)
        failure = DiskClearError("/cache", PermissionError("denied"))

        with patch.object(coordinator.disk, "clear", new_callable=AsyncMock) as mock_clear:
            mock_clear.side_effect = failure
            with pytest.raises(CacheClearError) as exc_info:
                await coordinator.clear()

        assert exc_info.value.errors == [failure]
        assert len(memory) == 0
