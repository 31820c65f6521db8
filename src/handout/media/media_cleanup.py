"""Idle-based eviction of stored assets."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .asset_store import AssetStore, utc_now
from .media_errors import AssetNotFoundError, StorageError
from .media_models import AssetFile, SweepReport

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EvictionSweeper:
    """Delete assets that have not been read for longer than ``idle_threshold``.

    The idle check and the access refresher are not mutually exclusive: an
    asset read just after it was listed can still be removed by the running
    sweep. Readers then get a not-found, which equals "already expired".
    """

    store: AssetStore
    idle_threshold: timedelta = timedelta(minutes=30)
    clock: Callable[[], datetime] = utc_now
    log: logging.Logger = field(default_factory=lambda: logger)

    def is_expired(self, asset: AssetFile, now: datetime) -> bool:
        return now - asset.last_accessed_at > self.idle_threshold

    def expired(self, now: datetime | None = None) -> list[AssetFile]:
        """Return assets eligible for eviction without deleting them."""
        current = now or self.clock()
        return [asset for asset in self.store.list() if self.is_expired(asset, current)]

    def sweep(self, now: datetime | None = None) -> SweepReport:
        current = now or self.clock()
        assets = self.store.list()
        report = SweepReport()
        self.log.info("media.sweep.started", extra={"asset_count": len(assets)})

        for asset in assets:
            idle_minutes = (current - asset.last_accessed_at).total_seconds() / 60
            if not self.is_expired(asset, current):
                self.log.debug(
                    "media.sweep.kept",
                    extra={"asset_name": asset.name, "idle_minutes": round(idle_minutes, 1)},
                )
                continue
            try:
                self.store.delete(asset.name)
            except AssetNotFoundError:
                self.log.debug("media.sweep.already_gone", extra={"asset_name": asset.name})
                continue
            except StorageError as exc:
                report.failed.append(asset.name)
                self.log.error(
                    "media.sweep.delete_failed",
                    extra={"asset_name": asset.name, "error": str(exc)},
                )
                continue
            report.deleted.append(asset.name)
            report.bytes_freed += asset.size_bytes
            self.log.info(
                "media.sweep.removed",
                extra={
                    "asset_name": asset.name,
                    "size_bytes": asset.size_bytes,
                    "idle_minutes": round(idle_minutes, 1),
                },
            )

        self.log.info(
            "media.sweep.completed",
            extra={
                "deleted_count": len(report.deleted),
                "bytes_freed": report.bytes_freed,
                "failed_count": len(report.failed),
            },
        )
        return report


__all__ = ["EvictionSweeper"]
