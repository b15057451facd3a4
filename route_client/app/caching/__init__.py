"""
Route client caching package.

Provides the two cache tiers used for conditional (ETag) revalidation and
the coordinator that composes them. The memory tier is fast and bounded;
the disk tier is durable and optionally size-bounded. Cache write and
promotion failures are advisory: they are logged and the request goes on.
"""

from .coordinator import CacheCoordinator
from .disk_tier import DiskTier
from .entry import CacheEntry
from .eviction import DiskEvictionPolicy
from .memory_tier import MemoryTier
from .tier import CacheTier

__all__ = [
    "CacheCoordinator",
    "CacheEntry",
    "CacheTier",
    "DiskEvictionPolicy",
    "DiskTier",
    "MemoryTier",
]
