"""Clients for the external presentation rendering service."""

from .converter_base import ConversionResult, RenderClient, RenderedImage
from .converter_http import HttpRenderClient

__all__ = ["ConversionResult", "HttpRenderClient", "RenderClient", "RenderedImage"]
