"""Data structures for the ingest pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FailureReason(StrEnum):
    """Batch-level failure reasons exposed in HTTP error bodies."""

    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    STORAGE_EXHAUSTED = "storage_exhausted"
    CONVERSION_FAILED = "conversion_failed"
    STORAGE_ERROR = "storage_error"
    INTERNAL_ERROR = "internal_error"


class DegradeReason(StrEnum):
    """Why a single slide fell back to a placeholder."""

    MISSING_LOCATOR = "missing_locator"
    DOWNLOAD_FAILED = "download_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(slots=True, frozen=True)
class SlideImage:
    """Reference to a stored asset or an inline placeholder image."""

    url: str
    asset_name: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.asset_name is None


@dataclass(slots=True, frozen=True)
class SlideRecord:
    slide_number: int
    image: SlideImage
    notes: str


@dataclass(slots=True, frozen=True)
class SlideOutcome:
    """Per-slide result: either complete or degraded to a placeholder."""

    record: SlideRecord
    degraded_reason: DegradeReason | None = None

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None


@dataclass(slots=True)
class UploadValidationResult:
    """Outcome of validating an uploaded package."""

    payload: bytes
    size_bytes: int
    filename: str
    content_type: str
