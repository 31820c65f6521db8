"""In-memory render client used by ingest tests."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from src.handout.converter.converter_base import ConversionResult, RenderClient, RenderedImage
from src.handout.ingest.ingest_errors import ConversionFailedError, DownloadFailedError


class StubRenderClient(RenderClient):
    """Render client returning canned pages.

    ``failing`` lists locators whose download raises ``DownloadFailedError``;
    ``raising`` maps locators to arbitrary exceptions and ``delays`` to sleeps.
    """

    def __init__(
        self,
        page_count: int,
        *,
        locators: Iterable[str] | None = None,
        failing: Iterable[str] = (),
        raising: dict[str, Exception] | None = None,
        delays: dict[str, float] | None = None,
        submit_error: ConversionFailedError | None = None,
        content_type: str = "image/png",
    ) -> None:
        self.page_count = page_count
        self.locators = (
            tuple(locators)
            if locators is not None
            else tuple(f"/images/page-{index}.png" for index in range(1, page_count + 1))
        )
        self.failing = set(failing)
        self.raising = dict(raising or {})
        self.delays = dict(delays or {})
        self.submit_error = submit_error
        self.content_type = content_type
        self.submitted: list[str] = []
        self.fetched: list[str] = []
        self.completed: list[str] = []

    async def submit(self, archive: bytes, *, filename: str = "presentation.pptx") -> ConversionResult:
        self.submitted.append(filename)
        if self.submit_error is not None:
            raise self.submit_error
        return ConversionResult(page_count=self.page_count, locators=self.locators)

    async def fetch(self, locator: str) -> RenderedImage:
        self.fetched.append(locator)
        if locator in self.delays:
            await asyncio.sleep(self.delays[locator])
        if locator in self.raising:
            raise self.raising[locator]
        if locator in self.failing:
            raise DownloadFailedError(f"cannot download {locator}")
        self.completed.append(locator)
        return RenderedImage(payload=f"image:{locator}".encode(), content_type=self.content_type)
