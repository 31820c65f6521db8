"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fastapi import UploadFile

from .ingest_errors import PayloadTooLargeError, UnsupportedMediaError, UploadReadError
from .ingest_models import UploadValidationResult

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"


@dataclass(slots=True)
class UploadValidator:
    """Validate uploaded presentation packages against configured limits."""

    max_upload_bytes: int
    chunk_size_bytes: int = 1024 * 1024
    log: logging.Logger = field(default_factory=lambda: logger)

    async def validate(self, upload: UploadFile) -> UploadValidationResult:
        chunks: list[bytes] = []
        size = 0
        try:
            while True:
                chunk = await upload.read(self.chunk_size_bytes)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_upload_bytes:
                    self.log.warning(
                        "ingest.upload.payload_too_large",
                        extra={"size_bytes": size, "limit_bytes": self.max_upload_bytes},
                    )
                    raise PayloadTooLargeError(size)
                chunks.append(chunk)
        except PayloadTooLargeError:
            raise
        except Exception as exc:  # pragma: no cover - broken client stream
            self.log.error("ingest.upload.read_failed", exc_info=exc)
            raise UploadReadError(str(exc)) from exc
        finally:
            await upload.close()

        payload = b"".join(chunks)
        if not payload.startswith(ZIP_MAGIC):
            self.log.warning(
                "ingest.upload.unsupported_media",
                extra={"content_type": upload.content_type, "size_bytes": size},
            )
            raise UnsupportedMediaError(upload.content_type or "unknown")

        result = UploadValidationResult(
            payload=payload,
            size_bytes=size,
            filename=upload.filename or "presentation.pptx",
            content_type=upload.content_type or "application/octet-stream",
        )
        self.log.info(
            "ingest.upload.validated",
            extra={
                "upload_filename": result.filename,
                "size_bytes": result.size_bytes,
                "content_type": result.content_type,
            },
        )
        return result
