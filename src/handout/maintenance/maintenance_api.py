"""Routes for storage maintenance: status, manual cleanup and scheduled cleanup."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..media.media_errors import StorageError
from ..schemas import StorageStatusSchema
from .maintenance_auth import require_cron_key
from .maintenance_schemas import (
    CleanupRequest,
    CleanupResponse,
    CronCleanupResponse,
    StorageStatusResponse,
)
from .maintenance_service import MaintenanceService

router = APIRouter(prefix="/api", tags=["maintenance"])
logger = logging.getLogger(__name__)


def get_maintenance_service(request: Request) -> MaintenanceService:
    try:
        return request.app.state.maintenance_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("MaintenanceService is not configured") from exc


def _invalid_action(action: str | None) -> HTTPException:
    logger.warning("maintenance.invalid_action", extra={"action": action})
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"status": "error", "failure_reason": "invalid_action"},
    )


def _storage_failure(exc: StorageError) -> HTTPException:
    logger.error("maintenance.storage_error", extra={"error": str(exc)})
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"status": "error", "failure_reason": "storage_error", "message": str(exc)},
    )


def _run_cleanup(service: MaintenanceService, trigger: str) -> CleanupResponse:
    try:
        return CleanupResponse.from_result(service.cleanup(trigger=trigger))
    except StorageError as exc:
        raise _storage_failure(exc) from exc


@router.get("/storage-cleanup", response_model=None)
def storage_maintenance(
    action: str | None = None,
    service: MaintenanceService = Depends(get_maintenance_service),
) -> StorageStatusResponse | CleanupResponse:
    """Report storage usage (``action=status``) or run a sweep (``action=cleanup``)."""
    if action == "cleanup":
        return _run_cleanup(service, trigger="manual")
    if action == "status":
        try:
            current = service.status()
        except StorageError as exc:
            raise _storage_failure(exc) from exc
        return StorageStatusResponse(storage=StorageStatusSchema.from_status(current))
    raise _invalid_action(action)


@router.post("/storage-cleanup", response_model=CleanupResponse)
def trigger_cleanup(
    payload: CleanupRequest,
    service: MaintenanceService = Depends(get_maintenance_service),
) -> CleanupResponse:
    if payload.action != "cleanup":
        raise _invalid_action(payload.action)
    return _run_cleanup(service, trigger="manual")


@router.get(
    "/cron/cleanup",
    response_model=CronCleanupResponse,
    dependencies=[Depends(require_cron_key)],
)
def scheduled_cleanup(
    service: MaintenanceService = Depends(get_maintenance_service),
) -> CronCleanupResponse:
    """Entry point for an external scheduler; gated by the shared secret."""
    result = _run_cleanup(service, trigger="cron")
    return CronCleanupResponse(message="Scheduled cleanup completed", result=result)
