"""Read-only access to zip-format mod archives."""

from __future__ import annotations

import zipfile
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from .errors import ArchiveError

ARCHIVE_SUFFIX = ".jar"


def is_archive_name(name: str) -> bool:
    """Return True when ``name`` carries the mod archive extension."""
    return name.lower().endswith(ARCHIVE_SUFFIX)


class ArchiveReader:
    """Open an archive read-only for the duration of a ``with`` block.

    The underlying handle is released on exit, so a reader is meant to be
    scoped to a single scan or extraction call.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._zip: Optional[zipfile.ZipFile] = None

    def __enter__(self) -> "ArchiveReader":
        try:
            self._zip = zipfile.ZipFile(self.path, "r")
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveError(f"Cannot open archive {self.path}: {exc}") from exc
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def entries(self, *, include_directories: bool = False) -> list[str]:
        """Return entry names in archive order, skipping directory entries by default."""
        handle = self._require_open()
        try:
            return [
                info.filename
                for info in handle.infolist()
                if include_directories or not info.is_dir()
            ]
        except (OSError, zipfile.BadZipFile) as exc:  # pragma: no cover - corrupt directory
            raise ArchiveError(f"Cannot list archive {self.path}: {exc}") from exc

    def read(self, entry: str) -> bytes:
        """Return the decompressed bytes of ``entry``.

        Raises:
            ArchiveError: If the entry does not exist or cannot be decompressed.
        """
        handle = self._require_open()
        try:
            return handle.read(entry)
        except KeyError as exc:
            raise ArchiveError(f"Entry {entry!r} not found in {self.path}") from exc
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise ArchiveError(f"Cannot read {entry!r} from {self.path}: {exc}") from exc

    def _require_open(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise ArchiveError(f"Archive {self.path} is not open.")
        return self._zip


def list_entries(path: Path) -> list[str]:
    """Open ``path``, list its file entries, and close it again."""
    with ArchiveReader(path) as reader:
        return reader.entries()


__all__ = ["ARCHIVE_SUFFIX", "ArchiveReader", "is_archive_name", "list_entries"]
