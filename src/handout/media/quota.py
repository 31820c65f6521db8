"""Storage quota checks gating new ingestion."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .asset_store import AssetStore
from .media_models import StorageStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuotaGate:
    """Compare current asset store usage against the configured cap.

    The check reserves nothing: two batches admitted at the same time may
    together push the store past the cap. The overshoot is bounded by the
    size of the batches in flight.
    """

    store: AssetStore
    max_size_bytes: int
    warning_ratio: float = 0.8
    log: logging.Logger = field(default_factory=lambda: logger)

    def status(self) -> StorageStatus:
        current = sum(asset.size_bytes for asset in self.store.list())
        result = StorageStatus(current_size_bytes=current, max_size_bytes=self.max_size_bytes)
        details = {
            "current_size_bytes": result.current_size_bytes,
            "max_size_bytes": result.max_size_bytes,
            "can_upload": result.can_upload,
        }
        if result.usage_ratio > self.warning_ratio:
            self.log.warning("media.storage.near_limit", extra=details)
        else:
            self.log.debug("media.storage.checked", extra=details)
        return result

    def admit(self) -> bool:
        return self.status().can_upload


__all__ = ["QuotaGate"]
