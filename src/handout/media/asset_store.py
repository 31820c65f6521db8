"""Flat directory of immutable rendered slide images.

The store keeps no index: size, creation instant and last access instant of
every asset are read back from ``stat``. The modification time is written
once at creation and never touched again, so it doubles as the creation
instant; the access time is what the access refresher moves forward.
"""

from __future__ import annotations

import contextlib
import logging
import os
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

from .media_errors import AssetNotFoundError, InvalidAssetNameError, StorageError
from .media_models import AssetFile

logger = logging.getLogger(__name__)

_STAGING_PREFIX = "."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _from_ns(value: int) -> datetime:
    seconds, remainder = divmod(value, 1_000_000_000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(microseconds=remainder // 1_000)


def _to_ns(moment: datetime) -> int:
    return int(moment.timestamp() * 1_000_000) * 1_000


def build_asset_name(slide_number: int, suffix: str, created_at: datetime) -> str:
    """Return a unique name embedding the slide index and creation instant."""
    sanitized = suffix.lstrip(".").lower() or "bin"
    micros = int(created_at.timestamp() * 1_000_000)
    return f"slide_{slide_number}_{micros}_{secrets.token_hex(4)}.{sanitized}"


@dataclass(slots=True)
class AssetStore:
    """Manage rendered images on disk."""

    root: Path
    clock: Callable[[], datetime] = utc_now
    log: logging.Logger = field(default_factory=lambda: logger)

    def ensure_root(self) -> Path:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create asset directory {self.root}") from exc
        return self.root

    def path_for(self, name: str) -> Path:
        if (
            not name
            or name.startswith(_STAGING_PREFIX)
            or "/" in name
            or "\\" in name
            or "\x00" in name
            or Path(name).name != name
        ):
            raise InvalidAssetNameError(name)
        return self.root / name

    def put(
        self,
        data: bytes,
        *,
        slide_number: int,
        suffix: str = "png",
        now: datetime | None = None,
    ) -> AssetFile:
        """Persist ``data`` as a new asset and return its metadata."""
        created_at = now or self.clock()
        name = build_asset_name(slide_number, suffix, created_at)
        target = self.ensure_root() / name
        staging = self.root / f"{_STAGING_PREFIX}{name}.part"
        stamp = _to_ns(created_at)
        try:
            with staging.open("xb") as sink:
                sink.write(data)
            os.utime(staging, ns=(stamp, stamp))
            os.replace(staging, target)
        except OSError as exc:
            with contextlib.suppress(OSError):
                staging.unlink(missing_ok=True)
            self.log.error(
                "media.asset.write_failed",
                extra={"asset_name": name, "error": str(exc)},
            )
            raise StorageError(f"Cannot write asset {name}") from exc

        self.log.debug(
            "media.asset.stored",
            extra={"asset_name": name, "size_bytes": len(data)},
        )
        return AssetFile(
            name=name,
            size_bytes=len(data),
            created_at=_from_ns(stamp),
            last_accessed_at=_from_ns(stamp),
        )

    def get(self, name: str) -> bytes:
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise AssetNotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"Cannot read asset {name}") from exc

    def stat(self, name: str) -> AssetFile:
        path = self.path_for(name)
        try:
            st = path.stat()
        except FileNotFoundError as exc:
            raise AssetNotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"Cannot stat asset {name}") from exc
        if not path.is_file():
            raise AssetNotFoundError(name)
        return self._to_asset(name, st)

    def touch(self, name: str, at: datetime) -> AssetFile:
        """Move the last access instant of ``name`` forward to ``at``.

        The access instant never moves backwards, so a late refresh cannot
        shorten the life of an asset that was read more recently.
        """
        path = self.path_for(name)
        try:
            st = path.stat()
            accessed_ns = max(_to_ns(at), st.st_atime_ns)
            os.utime(path, ns=(accessed_ns, st.st_mtime_ns))
        except FileNotFoundError as exc:
            raise AssetNotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"Cannot refresh asset {name}") from exc
        return AssetFile(
            name=name,
            size_bytes=st.st_size,
            created_at=_from_ns(st.st_mtime_ns),
            last_accessed_at=_from_ns(accessed_ns),
        )

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise AssetNotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"Cannot delete asset {name}") from exc

    def list(self) -> list[AssetFile]:
        """Return metadata for every asset currently in the store."""
        try:
            entries = list(os.scandir(self.root))
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Cannot list asset directory {self.root}") from exc

        assets: list[AssetFile] = []
        for entry in entries:
            if entry.name.startswith(_STAGING_PREFIX):
                continue
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                st = entry.stat(follow_symlinks=False)
            except FileNotFoundError:
                # removed between scandir and stat (usually by a sweep)
                continue
            except OSError as exc:
                self.log.warning(
                    "media.asset.stat_failed",
                    extra={"asset_name": entry.name, "error": str(exc)},
                )
                continue
            assets.append(self._to_asset(entry.name, st))
        return assets

    @staticmethod
    def _to_asset(name: str, st: os.stat_result) -> AssetFile:
        return AssetFile(
            name=name,
            size_bytes=st.st_size,
            created_at=_from_ns(st.st_mtime_ns),
            last_accessed_at=_from_ns(st.st_atime_ns),
        )


__all__ = ["AssetStore", "build_asset_name", "utc_now"]
