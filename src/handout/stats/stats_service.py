"""Per-asset lifetime statistics for the system dashboard."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..media.asset_store import AssetStore, utc_now

MIB = 1024 * 1024


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass(slots=True)
class StatsService:
    """Aggregate live assets for the system dashboard."""

    store: AssetStore
    max_size_bytes: int
    idle_threshold: timedelta
    clock: Callable[[], datetime] = utc_now

    def files_overview(self, now: datetime | None = None) -> dict[str, Any]:
        """Return every live asset (newest first) plus aggregate usage.

        ``time_remaining`` counts from the upload instant, so it may be
        negative for an asset that is eligible for eviction but still on disk.
        """
        current = now or self.clock()
        assets = sorted(self.store.list(), key=lambda asset: asset.created_at, reverse=True)
        threshold_ms = int(self.idle_threshold.total_seconds() * 1000)
        now_ms = _epoch_ms(current)
        files = [
            {
                "name": asset.name,
                "upload_time": _epoch_ms(asset.created_at),
                "time_remaining": _epoch_ms(asset.created_at) + threshold_ms - now_ms,
                "size_bytes": asset.size_bytes,
            }
            for asset in assets
        ]
        total = sum(asset.size_bytes for asset in assets)
        return {
            "files": files,
            "stats": {
                "total_files": len(files),
                "total_size_bytes": total,
                "total_size_mb": round(total / MIB, 2),
                "storage_limit_mb": round(self.max_size_bytes / MIB, 2),
                "usage_percentage": round(total / self.max_size_bytes * 100, 2),
            },
        }
