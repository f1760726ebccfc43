"""Zip archive access used by scanning and extraction."""

from .errors import ArchiveError
from .reader import ARCHIVE_SUFFIX, ArchiveReader, is_archive_name, list_entries

__all__ = ["ARCHIVE_SUFFIX", "ArchiveError", "ArchiveReader", "is_archive_name", "list_entries"]
