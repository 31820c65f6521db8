"""Extend the life of assets that are being served."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from .asset_store import AssetStore, utc_now
from .media_models import AssetFile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServedAsset:
    asset: AssetFile
    payload: bytes


@dataclass(slots=True)
class AccessRefresher:
    """Stamp ``last_accessed_at`` before handing out an asset's bytes."""

    store: AssetStore
    clock: Callable[[], datetime] = utc_now
    log: logging.Logger = field(default_factory=lambda: logger)

    def open(self, name: str) -> ServedAsset:
        """Refresh and read ``name``; raises ``AssetNotFoundError`` on a miss."""
        asset = self.store.touch(name, self.clock())
        payload = self.store.get(name)
        self.log.debug(
            "media.asset.refreshed",
            extra={"asset_name": name, "size_bytes": len(payload)},
        )
        return ServedAsset(asset=asset, payload=payload)


__all__ = ["AccessRefresher", "ServedAsset"]
