"""Pydantic schemas for maintenance endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from ..schemas import CamelModel, StorageStatusSchema
from .maintenance_service import CleanupResult


class CleanupSummarySchema(CamelModel):
    deleted_files: list[str]
    total_size_freed: int


class StorageStatusResponse(CamelModel):
    success: bool = True
    storage: StorageStatusSchema


class CleanupResponse(CamelModel):
    success: bool = True
    cleanup: CleanupSummarySchema
    storage: StorageStatusSchema

    @classmethod
    def from_result(cls, result: CleanupResult) -> "CleanupResponse":
        return cls(
            cleanup=CleanupSummarySchema(
                deleted_files=list(result.report.deleted),
                total_size_freed=result.report.bytes_freed,
            ),
            storage=StorageStatusSchema.from_status(result.status),
        )


class CronCleanupResponse(CamelModel):
    success: bool = True
    message: str
    result: CleanupResponse


class CleanupRequest(BaseModel):
    action: str | None = None
