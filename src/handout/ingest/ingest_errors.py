"""Domain-specific exceptions for the ingest pipeline."""

from __future__ import annotations

from typing import Any

from ..media.media_models import StorageStatus


class IngestError(Exception):
    """Base class for ingest-related errors."""


class UnsupportedMediaError(IngestError):
    """Raised when the upload is not a presentation package."""


class PayloadTooLargeError(IngestError):
    """Raised when the uploaded package exceeds the configured size cap."""


class UploadReadError(IngestError):
    """Raised when streaming the upload fails."""


class StorageExhaustedError(IngestError):
    """Raised when the asset store is at or above its quota."""

    def __init__(self, status: StorageStatus) -> None:
        super().__init__(
            f"Storage usage {status.current_size_gb} GB reached the "
            f"{status.max_size_gb} GB limit"
        )
        self.status = status


class ConversionFailedError(IngestError):
    """Raised when the rendering service cannot convert the package."""

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.detail = detail


class DownloadFailedError(IngestError):
    """Raised when a rendered slide image cannot be downloaded."""
