"""
Size-bounded eviction for the disk cache tier.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from shared.logging import get_logger

RECORD_SUFFIX = ".json"
TEMP_PREFIX = ".tmp-"


@dataclass(frozen=True)
class DiskRecord:
    """Snapshot of one on-disk cache record."""

    path: Path
    size: int
    modified_at: float


class DiskEvictionPolicy:
    """Delete the least recently modified records until the directory fits the budget.

    The directory listing is the only source of truth; there is no index.
    Records can disappear concurrently (another eviction, a clear, a
    replacement), so a missing file is counted as already evicted.
    """

    def __init__(self, max_size_bytes: int = 0):
        self.max_size_bytes = max_size_bytes
        self.logger = get_logger("route_client.cache.eviction")

    @property
    def enabled(self) -> bool:
        return self.max_size_bytes > 0

    def scan(self, directory: Path) -> List[DiskRecord]:
        """List cache records in ``directory``, oldest first."""
        records: List[DiskRecord] = []
        try:
            entries = list(os.scandir(directory))
        except FileNotFoundError:
            return records

        for entry in entries:
            if not entry.name.endswith(RECORD_SUFFIX) or entry.name.startswith(TEMP_PREFIX):
                continue
            try:
                stat = entry.stat()
            except FileNotFoundError:
                continue
            except OSError as exc:
                self.logger.warning("Failed to stat disk cache record", path=entry.path, error=str(exc))
                continue
            records.append(DiskRecord(Path(entry.path), stat.st_size, stat.st_mtime))

        records.sort(key=lambda record: (record.modified_at, record.path.name))
        return records

    def run(self, directory: Path) -> List[Path]:
        """Evict records from ``directory``; return the evicted paths."""
        if not self.enabled:
            return []

        records = self.scan(directory)
        total = sum(record.size for record in records)
        if total <= self.max_size_bytes:
            return []

        evicted: List[Path] = []
        for record in records:
            if total <= self.max_size_bytes:
                break
            try:
                record.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                self.logger.warning("Failed to evict disk cache record", path=str(record.path), error=str(exc))
                continue
            total -= record.size
            evicted.append(record.path)

        self.logger.info(
            "Disk cache eviction completed",
            directory=str(directory),
            evicted=len(evicted),
            remaining_bytes=total,
            budget_bytes=self.max_size_bytes
        )
        return evicted
