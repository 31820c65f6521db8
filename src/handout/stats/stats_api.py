"""Routes for storage statistics exposure."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..media.media_errors import StorageError
from .stats_schemas import SystemFilesResponse
from .stats_service import StatsService

router = APIRouter(prefix="/api/system", tags=["stats"])
logger = logging.getLogger(__name__)


def get_stats_service(request: Request) -> StatsService:
    try:
        return request.app.state.stats_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("StatsService is not configured") from exc


@router.get("/files", response_model=SystemFilesResponse)
def system_files(service: StatsService = Depends(get_stats_service)) -> SystemFilesResponse:
    """Return live assets with their remaining lifetime and aggregate usage."""
    try:
        overview = service.files_overview()
    except StorageError as exc:
        logger.error("stats.files.failed", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"status": "error", "failure_reason": "storage_error"},
        ) from exc
    logger.info(
        "stats.files.listed",
        extra={
            "total_files": overview["stats"]["total_files"],
            "total_size_bytes": overview["stats"]["total_size_bytes"],
        },
    )
    return SystemFilesResponse.model_validate(overview)
