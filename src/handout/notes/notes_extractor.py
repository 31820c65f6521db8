"""Speaker notes extraction from presentation packages."""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
import zipfile
import zlib
from dataclasses import dataclass, field

from .xml_tree import TreeNode, fold, parse_tree

logger = logging.getLogger(__name__)

NOTES_PART_TEMPLATE = "ppt/notesSlides/notesSlide{index}.xml"
MAX_NOTES_PART_BYTES = 5 * 1024 * 1024

_ARCHIVE_ERRORS = (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError, EOFError)
_PART_ERRORS = (
    ET.ParseError,
    zipfile.BadZipFile,
    zlib.error,
    OSError,
    EOFError,
    LookupError,
    ValueError,
    RuntimeError,
)


def notes_part_name(slide_number: int) -> str:
    return NOTES_PART_TEMPLATE.format(index=slide_number)


def _collect_leaf_text(acc: tuple[str, ...], node: TreeNode) -> tuple[str, ...]:
    if node.is_leaf and node.text and node.text.strip():
        return (*acc, node.text)
    return acc


def collect_text(tree: TreeNode) -> str:
    """Join every text-bearing leaf with newlines, in document order."""
    return "\n".join(fold(tree, _collect_leaf_text, ())).strip()


@dataclass(slots=True)
class NotesReader:
    """Read notes parts from one opened package.

    ``read`` never raises: a missing, oversized or malformed notes part
    yields an empty string so the remaining slides are unaffected.
    """

    archive: zipfile.ZipFile | None
    log: logging.Logger = field(default_factory=lambda: logger)

    @classmethod
    def from_bytes(cls, payload: bytes, *, log: logging.Logger | None = None) -> "NotesReader":
        log = log or logger
        try:
            archive = zipfile.ZipFile(io.BytesIO(payload))
        except _ARCHIVE_ERRORS as exc:
            log.warning("notes.archive.unreadable", extra={"error": str(exc)})
            archive = None
        return cls(archive=archive, log=log)

    def read(self, slide_number: int) -> str:
        if self.archive is None:
            return ""
        part_name = notes_part_name(slide_number)
        try:
            info = self.archive.getinfo(part_name)
        except KeyError:
            return ""
        if info.file_size > MAX_NOTES_PART_BYTES:
            self.log.warning(
                "notes.part.too_large",
                extra={"slide_number": slide_number, "size_bytes": info.file_size},
            )
            return ""
        try:
            tree = parse_tree(self.archive.read(info))
        except _PART_ERRORS as exc:
            self.log.warning(
                "notes.part.malformed",
                extra={"slide_number": slide_number, "part": part_name, "error": str(exc)},
            )
            return ""
        return collect_text(tree)

    def close(self) -> None:
        if self.archive is not None:
            self.archive.close()

    def __enter__(self) -> "NotesReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def extract_notes(archive: bytes, slide_number: int) -> str:
    """Return the notes text of ``slide_number`` (1-based) or ``""``."""
    with NotesReader.from_bytes(archive) as reader:
        return reader.read(slide_number)


__all__ = [
    "MAX_NOTES_PART_BYTES",
    "NotesReader",
    "collect_text",
    "extract_notes",
    "notes_part_name",
]
