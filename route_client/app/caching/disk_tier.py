"""
Durable disk cache tier.

Each entry lives in its own JSON record named after the SHA-256 of the key.
Writes go to a temporary file in the same directory and are then moved over
the target with ``os.replace``, so readers see either the old record or the
new one and never a partial write. Blocking file I/O runs in worker threads.
"""

import asyncio
import contextlib
import hashlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Set, Union

from shared.errors import DiskCacheMissError, DiskClearError, DiskWriteError
from shared.logging import get_logger
from .entry import CacheEntry
from .eviction import RECORD_SUFFIX, TEMP_PREFIX, DiskEvictionPolicy
from .tier import CacheTier

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class DiskTier(CacheTier):
    """File-per-entry cache tier with an optional total-size budget."""

    name = "disk"

    def __init__(
        self,
        directory: Union[str, Path],
        max_size_bytes: int = 0,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.directory = Path(directory)
        self.eviction_policy = DiskEvictionPolicy(max_size_bytes)
        self.metrics = metrics
        self.logger = get_logger("route_client.cache.disk")
        self._eviction_tasks: Set[asyncio.Task] = set()

    def path_for(self, key: str) -> Path:
        """Local record path for ``key``; stable across runs."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{RECORD_SUFFIX}"

    async def save(self, key: str, entry: CacheEntry) -> None:
        record = entry.to_bytes()
        path = self.path_for(key)

        await asyncio.to_thread(self._write, path, record)
        self.logger.debug("Disk cache entry saved", key=key, path=str(path), size=len(record))

        if self.eviction_policy.enabled:
            self._schedule_eviction()

    async def get(self, key: str) -> CacheEntry:
        path = self.path_for(key)
        try:
            record = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise DiskCacheMissError(key, str(path)) from exc
        except OSError as exc:
            self.logger.warning("Failed to read disk cache entry", key=key, path=str(path), error=str(exc))
            raise DiskCacheMissError(key, str(path)) from exc

        return CacheEntry.from_bytes(key, record)

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(shutil.rmtree, self.directory)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise DiskClearError(str(self.directory), exc) from exc

        self.logger.info("Disk cache cleared", directory=str(self.directory))

    async def drain(self) -> None:
        """Wait for outstanding background evictions."""
        while self._eviction_tasks:
            await asyncio.gather(*list(self._eviction_tasks), return_exceptions=True)

    def _write(self, path: Path, record: bytes) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=".part", dir=self.directory)
        except OSError as exc:
            raise DiskWriteError(str(path), exc) from exc

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(record)
            os.replace(temp_path, path)
        except OSError as exc:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(temp_path)
            raise DiskWriteError(str(path), exc) from exc

    def _schedule_eviction(self) -> None:
        # Detached from the caller: eviction outcomes are only logged.
        task = asyncio.get_running_loop().create_task(self._evict())
        self._eviction_tasks.add(task)
        task.add_done_callback(self._eviction_tasks.discard)

    async def _evict(self) -> None:
        try:
            evicted = await asyncio.to_thread(self.eviction_policy.run, self.directory)
        except Exception as exc:
            self.logger.error("Disk cache eviction failed", directory=str(self.directory), error=str(exc))
            return

        if evicted and self.metrics:
            try:
                self.metrics.increment_counter("disk_evictions_total", amount=len(evicted))
            except Exception as exc:  # pragma: no cover - metrics failures should never break eviction
                self.logger.debug("Failed to record eviction metrics", error=str(exc))
