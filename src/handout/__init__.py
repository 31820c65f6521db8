"""Slide handout service.

Converts uploaded presentation packages into per-slide records (rendered
image plus speaker notes) and serves the rendered images from a bounded,
idle-expiring asset store.
"""

__all__: list[str] = []
