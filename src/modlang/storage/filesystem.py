"""Filesystem primitives applied by the executor."""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from pathlib import Path

from send2trash import send2trash

from modlang.archive import ArchiveReader
from modlang.config.models import DeleteMode

LOGGER = logging.getLogger(__name__)


class FileSystem:
    """Mutating storage operations used when a plan is applied."""

    def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and any missing parents; succeed if it already exists."""
        Path(path).mkdir(parents=True, exist_ok=True)

    def move_with_overwrite(
        self, source: Path, destination: Path, delete_mode: DeleteMode = "permanent"
    ) -> None:
        """Move ``source`` to ``destination``, replacing whatever is already there.

        Args:
            source: File or directory to move.
            destination: Final location of the entry.
            delete_mode: How an existing destination is removed.

        Raises:
            FileNotFoundError: If ``source`` is neither a file nor a directory.
        """
        source = Path(source)
        destination = Path(destination)
        if destination.exists() or destination.is_symlink():
            self.delete_path(destination, delete_mode)

        destination.parent.mkdir(parents=True, exist_ok=True)

        if not (source.is_file() or source.is_dir()):
            raise FileNotFoundError(f"Source path not found: {source}")
        shutil.move(os.fspath(source), os.fspath(destination))

    def delete_path(self, path: Path, delete_mode: DeleteMode = "permanent") -> None:
        """Delete a file or directory tree; a missing path is not an error."""
        path = Path(path)
        if not (path.exists() or path.is_symlink()):
            return

        if delete_mode == "recycle":
            LOGGER.debug("Sending %s to the recycle bin", path)
            send2trash(os.fspath(path))
            return

        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def backup_archive(self, source: Path, archive_path: Path) -> None:
        """Write a fresh zip of ``source`` to ``archive_path``.

        Member names keep the source's own top-level name, so extracting the
        backup recreates ``<name>/...``. A file source is stored as one member.
        """
        source = Path(source)
        archive_path = Path(archive_path)
        if not (source.is_file() or source.is_dir()):
            raise FileNotFoundError(f"Backup source not found: {source}")
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        if archive_path.exists():
            archive_path.unlink()

        base = source.parent
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            if source.is_file():
                zf.write(source, arcname=source.name)
                return
            zf.write(source, arcname=source.name)
            for dirpath, dirnames, filenames in os.walk(source):
                dirnames.sort()
                current = Path(dirpath)
                for dirname in dirnames:
                    child = current / dirname
                    zf.write(child, arcname=child.relative_to(base).as_posix())
                for filename in sorted(filenames):
                    child = current / filename
                    zf.write(child, arcname=child.relative_to(base).as_posix())

    def extract_archive_entry(
        self, archive_path: Path, entry_path: str, destination_path: Path
    ) -> None:
        """Copy a single archive entry to ``destination_path``, overwriting it."""
        with ArchiveReader(Path(archive_path)) as reader:
            payload = reader.read(entry_path)
        destination_path = Path(destination_path)
        destination_path.parent.mkdir(parents=True, exist_ok=True)
        destination_path.write_bytes(payload)
