"""Pydantic schemas for the system files endpoint."""

from __future__ import annotations

from pydantic import Field

from ..schemas import CamelModel


class FileInfoSchema(CamelModel):
    name: str
    upload_time: int
    time_remaining: int
    size_bytes: int


class SystemStatsSchema(CamelModel):
    total_files: int
    total_size_bytes: int
    total_size_mb: float = Field(alias="totalSizeMB")
    storage_limit_mb: float = Field(alias="storageLimitMB")
    usage_percentage: float


class SystemFilesResponse(CamelModel):
    success: bool = True
    files: list[FileInfoSchema]
    stats: SystemStatsSchema
