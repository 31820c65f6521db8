"""Pydantic response models shared by several routers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..media.media_models import StorageStatus

__all__ = ["CamelModel", "StorageStatusSchema"]


class CamelModel(BaseModel):
    """Snake-case attributes rendered as camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StorageStatusSchema(CamelModel):
    can_upload: bool
    current_size_bytes: int
    max_size_bytes: int
    current_size_gb: float = Field(alias="currentSizeGB")
    max_size_gb: float = Field(alias="maxSizeGB")

    @classmethod
    def from_status(cls, status: StorageStatus) -> "StorageStatusSchema":
        return cls(
            can_upload=status.can_upload,
            current_size_bytes=status.current_size_bytes,
            max_size_bytes=status.max_size_bytes,
            current_size_gb=status.current_size_gb,
            max_size_gb=status.max_size_gb,
        )
