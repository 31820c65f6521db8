"""Ingestion orchestrator turning a presentation package into slide records."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from fastapi import UploadFile

from ..converter.converter_base import RenderClient
from ..media.asset_store import AssetStore
from ..media.media_cleanup import EvictionSweeper
from ..media.media_errors import StorageError
from ..media.media_models import StorageStatus
from ..media.quota import QuotaGate
from ..notes.notes_extractor import NotesReader
from .ingest_errors import DownloadFailedError, StorageExhaustedError
from .ingest_models import (
    DegradeReason,
    SlideImage,
    SlideOutcome,
    SlideRecord,
    UploadValidationResult,
)
from .placeholder import placeholder_data_uri
from .validation import UploadValidator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestService:
    """Coordinates the ingest workflow.

    Failures are split in two classes. Storage exhaustion and conversion
    failures abort the batch before any record is produced. A failed
    download or write only degrades its own slide to a placeholder, so every
    page reported by the converter yields exactly one record.
    """

    converter: RenderClient
    store: AssetStore
    quota: QuotaGate
    validator: UploadValidator
    sweeper: EvictionSweeper | None = None
    public_url_prefix: str = "/uploads"
    fetch_concurrency: int = 4
    log: logging.Logger = field(default_factory=lambda: logger)

    async def validate_upload(self, upload: UploadFile) -> UploadValidationResult:
        return await self.validator.validate(upload)

    def check_admission(self) -> StorageStatus:
        """Sweep opportunistically, then refuse the batch if the store is full."""
        self._sweep_before_admission()
        status = self.quota.status()
        if not status.can_upload:
            self.log.warning(
                "ingest.storage_exhausted",
                extra={
                    "current_size_bytes": status.current_size_bytes,
                    "max_size_bytes": status.max_size_bytes,
                },
            )
            raise StorageExhaustedError(status)
        return status

    async def ingest(
        self, archive: bytes, *, filename: str = "presentation.pptx"
    ) -> list[SlideRecord]:
        outcomes = await self.ingest_outcomes(archive, filename=filename)
        return [outcome.record for outcome in outcomes]

    async def ingest_outcomes(
        self, archive: bytes, *, filename: str = "presentation.pptx"
    ) -> list[SlideOutcome]:
        """Run the whole batch and return one outcome per page, in page order."""
        await asyncio.to_thread(self.check_admission)
        conversion = await self.converter.submit(archive, filename=filename)
        if len(conversion.locators) < conversion.page_count:
            self.log.warning(
                "ingest.converter.missing_locators",
                extra={
                    "page_count": conversion.page_count,
                    "locator_count": len(conversion.locators),
                },
            )

        started_at = time.monotonic()
        semaphore = asyncio.Semaphore(max(1, self.fetch_concurrency))
        with NotesReader.from_bytes(archive, log=self.log) as notes:
            outcomes = await asyncio.gather(
                *(
                    self._build_slide(
                        slide_number,
                        _locator_at(conversion.locators, slide_number),
                        notes,
                        semaphore,
                    )
                    for slide_number in range(1, conversion.page_count + 1)
                )
            )

        degraded = [outcome.record.slide_number for outcome in outcomes if outcome.degraded]
        self.log.info(
            "ingest.batch.completed",
            extra={
                "slide_count": len(outcomes),
                "degraded_slides": degraded,
                "duration_seconds": round(time.monotonic() - started_at, 3),
            },
        )
        return list(outcomes)

    def asset_url(self, name: str) -> str:
        return f"{self.public_url_prefix.rstrip('/')}/{name}"

    async def _build_slide(
        self,
        slide_number: int,
        locator: str | None,
        notes: NotesReader,
        semaphore: asyncio.Semaphore,
    ) -> SlideOutcome:
        try:
            return await self._render_slide(slide_number, locator, notes, semaphore)
        except Exception as exc:
            self.log.exception(
                "ingest.slide.unexpected_error", extra={"slide_number": slide_number}
            )
            return self._degraded(slide_number, DegradeReason.UNEXPECTED_ERROR, exc)

    async def _render_slide(
        self,
        slide_number: int,
        locator: str | None,
        notes: NotesReader,
        semaphore: asyncio.Semaphore,
    ) -> SlideOutcome:
        if locator is None:
            return self._degraded(slide_number, DegradeReason.MISSING_LOCATOR, None)

        async with semaphore:
            try:
                image = await self.converter.fetch(locator)
            except DownloadFailedError as exc:
                return self._degraded(slide_number, DegradeReason.DOWNLOAD_FAILED, exc)
            try:
                asset = await asyncio.to_thread(
                    self.store.put,
                    image.payload,
                    slide_number=slide_number,
                    suffix=_extension_from_content_type(image.content_type),
                )
            except StorageError as exc:
                return self._degraded(slide_number, DegradeReason.STORAGE_WRITE_FAILED, exc)

        record = SlideRecord(
            slide_number=slide_number,
            image=SlideImage(url=self.asset_url(asset.name), asset_name=asset.name),
            notes=notes.read(slide_number),
        )
        self.log.debug(
            "ingest.slide.completed",
            extra={
                "slide_number": slide_number,
                "asset_name": asset.name,
                "notes_length": len(record.notes),
            },
        )
        return SlideOutcome(record=record)

    def _degraded(
        self, slide_number: int, reason: DegradeReason, error: Exception | None
    ) -> SlideOutcome:
        self.log.warning(
            "ingest.slide.degraded",
            extra={
                "slide_number": slide_number,
                "reason": reason.value,
                "error": str(error) if error else None,
            },
        )
        record = SlideRecord(
            slide_number=slide_number,
            image=SlideImage(url=placeholder_data_uri(slide_number)),
            notes="",
        )
        return SlideOutcome(record=record, degraded_reason=reason)

    def _sweep_before_admission(self) -> None:
        if self.sweeper is None:
            return
        try:
            self.sweeper.sweep()
        except StorageError as exc:
            self.log.warning("ingest.sweep.failed", extra={"error": str(exc)})


def _locator_at(locators: tuple[str, ...], slide_number: int) -> str | None:
    if slide_number <= len(locators):
        return locators[slide_number - 1]
    return None


def _extension_from_content_type(content_type: str) -> str:
    mapping = {
        "image/jpeg": "jpg",
        "image/png": "png",
        "image/gif": "gif",
        "image/webp": "webp",
    }
    return mapping.get(content_type.lower(), "png")


__all__ = ["IngestService"]
