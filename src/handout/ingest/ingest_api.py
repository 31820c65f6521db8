"""HTTP route turning an uploaded presentation into slide records."""

from __future__ import annotations

import logging
import uuid

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from ..media.media_errors import StorageError
from ..schemas import StorageStatusSchema
from .ingest_errors import (
    ConversionFailedError,
    PayloadTooLargeError,
    StorageExhaustedError,
    UnsupportedMediaError,
    UploadReadError,
)
from .ingest_models import FailureReason
from .ingest_schemas import IngestResponse, SlideSchema
from .ingest_service import IngestService

router = APIRouter(prefix="/api", tags=["ingest"])
logger = logging.getLogger(__name__)


def get_ingest_service(request: Request) -> IngestService:
    """Fetch ingest service from application state."""
    try:
        return request.app.state.ingest_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("IngestService is not configured") from exc


@router.post("/process-pptx", response_model=IngestResponse)
async def process_presentation(
    file: UploadFile | None = File(None),
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    """Validate the package, render every slide and return the ordered records."""
    if file is None:
        logger.warning("ingest.invalid_request_missing_file")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "status": "error",
                "failure_reason": FailureReason.INVALID_REQUEST.value,
                "details": "file is required",
            },
        )

    try:
        upload = await service.validate_upload(file)
    except UnsupportedMediaError as exc:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail={
                "status": "error",
                "failure_reason": FailureReason.UNSUPPORTED_MEDIA_TYPE.value,
                "details": "file is not a presentation package",
            },
        ) from exc
    except PayloadTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "status": "error",
                "failure_reason": FailureReason.PAYLOAD_TOO_LARGE.value,
            },
        ) from exc
    except UploadReadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "status": "error",
                "failure_reason": FailureReason.INVALID_REQUEST.value,
            },
        ) from exc

    with structlog.contextvars.bound_contextvars(batch_id=uuid.uuid4().hex):
        try:
            records = await service.ingest(upload.payload, filename=upload.filename)
        except StorageExhaustedError as exc:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={
                    "status": "error",
                    "failure_reason": FailureReason.STORAGE_EXHAUSTED.value,
                    "message": (
                        f"Storage is full ({exc.status.current_size_gb} GB used of "
                        f"{exc.status.max_size_gb} GB). Try again once older slides expire."
                    ),
                    "storage": StorageStatusSchema.from_status(exc.status).model_dump(
                        by_alias=True
                    ),
                },
            ) from exc
        except ConversionFailedError as exc:
            logger.error(
                "ingest.conversion_failed",
                extra={"error": str(exc), "detail": exc.detail},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "status": "error",
                    "failure_reason": FailureReason.CONVERSION_FAILED.value,
                    "message": str(exc),
                    "details": exc.detail,
                },
            ) from exc
        except StorageError as exc:
            logger.exception("ingest.storage_error")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "status": "error",
                    "failure_reason": FailureReason.STORAGE_ERROR.value,
                },
            ) from exc

    return IngestResponse(slides=[SlideSchema.from_record(record) for record in records])
