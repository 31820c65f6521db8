"""Pydantic schemas for ingest responses."""

from __future__ import annotations

from pydantic import Field

from ..schemas import CamelModel
from .ingest_models import SlideRecord


class SlideSchema(CamelModel):
    slide_number: int = Field(..., ge=1)
    image_url: str
    notes: str

    @classmethod
    def from_record(cls, record: SlideRecord) -> "SlideSchema":
        return cls(
            slide_number=record.slide_number,
            image_url=record.image.url,
            notes=record.notes,
        )


class IngestResponse(CamelModel):
    slides: list[SlideSchema]
