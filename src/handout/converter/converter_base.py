"""Abstract render client definition."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ConversionResult:
    """Page count and one download locator per rendered page."""

    page_count: int
    locators: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class RenderedImage:
    payload: bytes
    content_type: str


class RenderClient(ABC):
    """Base interface for rendering service clients."""

    @abstractmethod
    async def submit(self, archive: bytes, *, filename: str) -> ConversionResult:
        """Convert the whole package; raises ``ConversionFailedError``."""

    @abstractmethod
    async def fetch(self, locator: str) -> RenderedImage:
        """Download one rendered page; raises ``DownloadFailedError``."""
