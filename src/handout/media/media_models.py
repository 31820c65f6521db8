"""Media data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class AssetFile:
    """Metadata of a stored asset, derived from filesystem stat calls."""

    name: str
    size_bytes: int
    created_at: datetime
    last_accessed_at: datetime


@dataclass(slots=True, frozen=True)
class StorageStatus:
    """Point-in-time usage of the asset store."""

    current_size_bytes: int
    max_size_bytes: int

    @property
    def can_upload(self) -> bool:
        return self.current_size_bytes < self.max_size_bytes

    @property
    def usage_ratio(self) -> float:
        return self.current_size_bytes / self.max_size_bytes

    @property
    def current_size_gb(self) -> float:
        return round(self.current_size_bytes / (1024 * 1024 * 1024), 2)

    @property
    def max_size_gb(self) -> float:
        return round(self.max_size_bytes / (1024 * 1024 * 1024), 2)


@dataclass(slots=True)
class SweepReport:
    """Outcome of a single eviction sweep."""

    deleted: list[str] = field(default_factory=list)
    bytes_freed: int = 0
    failed: list[str] = field(default_factory=list)
