"""Inline stand-in image for slides whose rendering could not be fetched."""

from __future__ import annotations

import base64

_TEMPLATE = (
    '<svg width="400" height="300" xmlns="http://www.w3.org/2000/svg">'
    '<rect width="400" height="300" fill="#f0f0f0" stroke="#ccc"/>'
    '<text x="200" y="150" text-anchor="middle" fill="#666" font-size="16">'
    "Slide {slide_number}"
    "</text>"
    "</svg>"
)


def placeholder_svg(slide_number: int) -> str:
    return _TEMPLATE.format(slide_number=slide_number)


def placeholder_data_uri(slide_number: int) -> str:
    """Return a deterministic ``data:`` URI; nothing is written to disk."""
    encoded = base64.b64encode(placeholder_svg(slide_number).encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
