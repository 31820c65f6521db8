"""Helpers for serving stored slide images to clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from fastapi import HTTPException, status
from fastapi.responses import Response

from .access_refresher import AccessRefresher
from .media_errors import AssetNotFoundError, InvalidAssetNameError, StorageError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PublicMediaService:
    """Expose stored assets for the duration of their idle window."""

    refresher: AccessRefresher
    cache_max_age_seconds: int = 3600
    log: logging.Logger = field(default_factory=lambda: logger)

    def open_media(self, name: str) -> Response:
        """Return the asset bytes or raise HTTP errors."""
        try:
            served = self.refresher.open(name)
        except InvalidAssetNameError as exc:
            self.log.warning("public.media.invalid_name", extra={"asset_name": name})
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"status": "error", "failure_reason": "invalid_asset_name"},
            ) from exc
        except AssetNotFoundError as exc:
            # never stored, or already evicted by a sweep
            self.log.info("public.media.not_found", extra={"asset_name": name})
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"status": "error", "failure_reason": "asset_not_found"},
            ) from exc
        except StorageError as exc:
            self.log.error(
                "public.media.read_failed",
                extra={"asset_name": name, "error": str(exc)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"status": "error", "failure_reason": "storage_error"},
            ) from exc

        content_type = guess_mime(PurePosixPath(name).suffix)
        self.log.info(
            "public.media.served",
            extra={
                "asset_name": name,
                "size_bytes": len(served.payload),
                "content_type": content_type,
            },
        )
        return Response(
            content=served.payload,
            media_type=content_type,
            headers={"Cache-Control": f"public, max-age={self.cache_max_age_seconds}"},
        )


def guess_mime(suffix: str) -> str:
    lowered = suffix.lower()
    if lowered in {".jpg", ".jpeg"}:
        return "image/jpeg"
    if lowered == ".png":
        return "image/png"
    if lowered == ".gif":
        return "image/gif"
    if lowered == ".webp":
        return "image/webp"
    return "application/octet-stream"


__all__ = ["PublicMediaService", "guess_mime"]
