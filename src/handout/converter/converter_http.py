"""HTTP client for the external presentation rendering service."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..ingest.ingest_errors import ConversionFailedError, DownloadFailedError
from .converter_base import ConversionResult, RenderClient, RenderedImage

logger = logging.getLogger(__name__)

PPTX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


@dataclass(slots=True)
class HttpRenderClient(RenderClient):
    """Submit packages to ``POST /convert`` and download the rendered pages.

    The client keeps no state between calls and never retries; every call is
    bounded by its own timeout.
    """

    base_url: str
    submit_timeout_seconds: float = 120.0
    fetch_timeout_seconds: float = 30.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def submit(self, archive: bytes, *, filename: str = "presentation.pptx") -> ConversionResult:
        url = f"{self.base_url.rstrip('/')}/convert"
        self.log.info(
            "converter.submit.start",
            extra={"url": url, "size_bytes": len(archive), "upload_filename": filename},
        )
        try:
            response = await asyncio.wait_for(
                self._post_package(url, archive, filename),
                timeout=self.submit_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ConversionFailedError(
                f"Converter did not answer within {self.submit_timeout_seconds}s"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ConversionFailedError(f"Converter request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            detail = _error_detail(response)
            self.log.error(
                "converter.submit.rejected",
                extra={"status_code": response.status_code, "detail": detail},
            )
            raise ConversionFailedError(
                f"Conversion failed with status {response.status_code}", detail=detail
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ConversionFailedError("Converter returned invalid JSON") from exc

        result = _parse_conversion(body)
        self.log.info(
            "converter.submit.done",
            extra={"page_count": result.page_count, "locator_count": len(result.locators)},
        )
        return result

    async def fetch(self, locator: str) -> RenderedImage:
        url = self.resolve(locator)
        try:
            response = await asyncio.wait_for(
                self._get(url), timeout=self.fetch_timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            raise DownloadFailedError(
                f"Download of {url} exceeded {self.fetch_timeout_seconds}s"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise DownloadFailedError(f"Download of {url!r} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise DownloadFailedError(
                f"Download of {url} failed with status {response.status_code}"
            )
        if not response.content:
            raise DownloadFailedError(f"Download of {url} returned no data")

        content_type = response.headers.get("Content-Type", "image/png")
        return RenderedImage(
            payload=response.content,
            content_type=content_type.split(";", 1)[0].strip() or "image/png",
        )

    def resolve(self, locator: str) -> str:
        if locator.startswith(("http://", "https://")):
            return locator
        return f"{self.base_url.rstrip('/')}/{locator.lstrip('/')}"

    async def _post_package(self, url: str, archive: bytes, filename: str) -> httpx.Response:
        files = {"file": (filename, archive, PPTX_CONTENT_TYPE)}
        async with httpx.AsyncClient(timeout=self.submit_timeout_seconds) as client:
            return await client.post(url, files=files)

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.fetch_timeout_seconds) as client:
            return await client.get(url)


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "")[:500] or None
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or body
    return body


def _parse_conversion(body: Any) -> ConversionResult:
    if not isinstance(body, dict):
        raise ConversionFailedError("Converter response is not an object", detail=body)
    page_count = body.get("total_pages")
    locators = body.get("image_download_urls")
    if isinstance(page_count, bool) or not isinstance(page_count, int) or page_count < 0:
        raise ConversionFailedError("Converter response has no valid total_pages", detail=body)
    if not isinstance(locators, list) or not all(isinstance(item, str) for item in locators):
        raise ConversionFailedError(
            "Converter response has no valid image_download_urls", detail=body
        )
    return ConversionResult(page_count=page_count, locators=tuple(locators))


__all__ = ["HttpRenderClient", "PPTX_CONTENT_TYPE"]
