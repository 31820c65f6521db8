"""Storage maintenance actions shared by the manual and scheduled triggers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..media.media_cleanup import EvictionSweeper
from ..media.media_models import StorageStatus, SweepReport
from ..media.quota import QuotaGate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupResult:
    report: SweepReport
    status: StorageStatus


@dataclass(slots=True)
class MaintenanceService:
    quota: QuotaGate
    sweeper: EvictionSweeper
    log: logging.Logger = field(default_factory=lambda: logger)

    def status(self) -> StorageStatus:
        return self.quota.status()

    def cleanup(self, *, trigger: str = "manual") -> CleanupResult:
        """Run the sweeper synchronously and report fresh usage."""
        report = self.sweeper.sweep()
        status = self.quota.status()
        self.log.info(
            "maintenance.cleanup.completed",
            extra={
                "trigger": trigger,
                "deleted_count": len(report.deleted),
                "bytes_freed": report.bytes_freed,
                "current_size_bytes": status.current_size_bytes,
            },
        )
        return CleanupResult(report=report, status=status)
