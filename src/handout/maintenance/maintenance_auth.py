"""Shared-secret gate for the scheduled cleanup trigger."""

from __future__ import annotations

import hmac
import logging

from fastapi import HTTPException, Query, Request, status

logger = logging.getLogger(__name__)


def get_cron_secret(request: Request) -> str:
    try:
        return request.app.state.cron_secret  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("Cron secret is not configured") from exc


def verify_secret(provided: str | None, expected: str) -> bool:
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_cron_key(request: Request, key: str | None = Query(None)) -> None:
    if not verify_secret(key, get_cron_secret(request)):
        logger.warning("maintenance.cron.unauthorized", extra={"has_key": bool(key)})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "unauthorized"},
        )
