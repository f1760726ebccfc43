"""Scan result models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Tuple

from pydantic import BaseModel, ConfigDict

SourceKind = Literal["folder", "archive"]


class ScanResult(BaseModel):
    """Classification of one mod unit under the target directory.

    Attributes:
        source_kind: Whether the unit is a plain folder or a `.jar` archive.
        unit_name: Display name (folder name or archive file name).
        unit_path: Absolute location of the folder or archive file.
        has_assets_root: Whether a top-level `assets` folder exists.
        lang_candidates: Localization folders found in the unit. Full directory
            paths for folders, archive-internal prefixes for archives. Unique
            and sorted without regard to case.
    """

    model_config = ConfigDict(frozen=True)

    source_kind: SourceKind = "folder"
    unit_name: str
    unit_path: Path
    has_assets_root: bool = False
    lang_candidates: Tuple[str, ...] = ()

    @property
    def is_archive(self) -> bool:
        return self.source_kind == "archive"

    @property
    def lang_count(self) -> int:
        return len(self.lang_candidates)


__all__ = ["ScanResult", "SourceKind"]
