"""Discovery and classification of mod units."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from modlang.archive import ArchiveError, ArchiveReader, is_archive_name

from .models import ScanResult, SourceKind

LOGGER = logging.getLogger(__name__)

LANG_DIRNAME = "lang"
ASSETS_DIRNAME = "assets"
LANG_FILE_SUFFIXES = (".json", ".lang")
# Working folders created by runs inside the target directory.
RESERVED_DIRNAMES = frozenset({"_backup", "_extracted"})


def is_lang_file(name: str) -> bool:
    """Return True when ``name`` has a localization file extension."""
    return name.lower().endswith(LANG_FILE_SUFFIXES)


def normalize_candidates(values: Iterable[str]) -> tuple[str, ...]:
    """Drop case-insensitive duplicates (first spelling wins) and sort without case."""
    unique: dict[str, str] = {}
    for value in values:
        unique.setdefault(value.casefold(), value)
    return tuple(sorted(unique.values(), key=str.casefold))


def _same_path(left: Path, right: Path) -> bool:
    return os.fspath(left).rstrip(os.sep).casefold() == os.fspath(right).rstrip(os.sep).casefold()


class ModScanner:
    """Enumerate mod units under a target directory and locate their lang folders."""

    def scan(
        self,
        target_dir: Path | str | None,
        include_archives: bool = False,
        should_stop: Optional[Callable[[Path], bool]] = None,
    ) -> list[ScanResult]:
        """Classify every mod unit directly under ``target_dir``.

        Args:
            target_dir: Parent directory holding the mod units.
            include_archives: Also treat `.jar` files as units.
            should_stop: Predicate consulted with each unit path before it is
                processed; returning True ends the scan early.

        Returns:
            list[ScanResult]: One result per processed unit, ordered by path.
                A missing target yields an empty list.
        """
        if target_dir is None or not str(target_dir).strip():
            return []
        root = Path(target_dir).expanduser()
        if not root.is_dir():
            return []

        results: list[ScanResult] = []
        for path, kind in self._discover_units(root, include_archives):
            if should_stop is not None and should_stop(path):
                LOGGER.info("Scan stopped before %s", path)
                break
            if kind == "archive":
                result = self._scan_archive(path)
            else:
                result = self._scan_folder(path)
            LOGGER.debug(
                "Scanned %s (%s): assets=%s candidates=%d",
                result.unit_name,
                result.source_kind,
                result.has_assets_root,
                result.lang_count,
            )
            results.append(result)

        return results

    # ------------------------------------------------------------------ #
    # Unit discovery                                                     #
    # ------------------------------------------------------------------ #

    def _discover_units(
        self, root: Path, include_archives: bool
    ) -> list[tuple[Path, SourceKind]]:
        try:
            children = list(root.iterdir())
        except OSError as exc:
            LOGGER.debug("Cannot list %s: %s", root, exc)
            return []

        units: list[tuple[Path, SourceKind]] = []
        for child in children:
            if child.is_dir():
                if child.name.casefold() in RESERVED_DIRNAMES:
                    continue
                units.append((child, "folder"))
            elif include_archives and child.is_file() and is_archive_name(child.name):
                units.append((child, "archive"))

        units.sort(key=lambda unit: os.fspath(unit[0]).casefold())
        return units

    # ------------------------------------------------------------------ #
    # Folder units                                                       #
    # ------------------------------------------------------------------ #

    def _scan_folder(self, unit: Path) -> ScanResult:
        assets = unit / ASSETS_DIRNAME
        has_assets = assets.is_dir()

        found: list[Path] = []
        if has_assets:
            found.extend(self._assets_lang_dirs(assets))
        found.extend(self._loose_lang_dirs(unit))

        return ScanResult(
            source_kind="folder",
            unit_name=unit.name,
            unit_path=unit,
            has_assets_root=has_assets,
            lang_candidates=normalize_candidates(os.fspath(path) for path in found),
        )

    def _assets_lang_dirs(self, assets: Path) -> list[Path]:
        """Return `assets/<id>/lang` folders; any other depth is rejected."""
        found: list[Path] = []
        for dirpath, dirnames, _ in os.walk(assets):
            if LANG_DIRNAME not in dirnames:
                continue
            candidate = Path(dirpath) / LANG_DIRNAME
            if _same_path(candidate.parent.parent, assets):
                found.append(candidate)
        return found

    def _loose_lang_dirs(self, unit: Path) -> list[Path]:
        """Return `lang` folders outside `assets` that hold localization files."""
        destination = unit / LANG_DIRNAME
        found: list[Path] = []
        for dirpath, dirnames, _ in os.walk(unit):
            current = Path(dirpath)
            if _same_path(current, unit):
                # assets/ is covered by the shape-exact pass
                dirnames[:] = [name for name in dirnames if name != ASSETS_DIRNAME]
            for name in dirnames:
                if name != LANG_DIRNAME:
                    continue
                candidate = current / name
                if _same_path(candidate, destination):
                    continue
                if self._contains_lang_file(candidate):
                    found.append(candidate)
        return found

    def _contains_lang_file(self, directory: Path) -> bool:
        for _, _, filenames in os.walk(directory):
            if any(is_lang_file(name) for name in filenames):
                return True
        return False

    # ------------------------------------------------------------------ #
    # Archive units                                                      #
    # ------------------------------------------------------------------ #

    def _scan_archive(self, archive: Path) -> ScanResult:
        try:
            with ArchiveReader(archive) as reader:
                names = reader.entries(include_directories=True)
        except ArchiveError as exc:
            LOGGER.debug("Treating unreadable archive %s as empty: %s", archive, exc)
            names = []

        normalized = [name.replace("\\", "/") for name in names]
        has_assets = any(name.lower().startswith(ASSETS_DIRNAME + "/") for name in normalized)

        prefixes: list[str] = []
        for name in normalized:
            prefix = lang_prefix_of(name)
            if prefix is not None:
                prefixes.append(prefix)

        return ScanResult(
            source_kind="archive",
            unit_name=archive.name,
            unit_path=archive,
            has_assets_root=has_assets,
            lang_candidates=normalize_candidates(prefixes),
        )


def lang_prefix_of(entry_name: str) -> Optional[str]:
    """Return the containing folder of a localization file that sits directly in `lang`.

    ``assets/mod/lang/en_us.json`` yields ``assets/mod/lang``; directory entries,
    non-localization files and files in any other folder yield None.
    """
    if entry_name.endswith("/") or not is_lang_file(entry_name):
        return None
    prefix, _, _ = entry_name.rpartition("/")
    if not prefix or prefix.rpartition("/")[2] != LANG_DIRNAME:
        return None
    return prefix


__all__ = [
    "ASSETS_DIRNAME",
    "LANG_DIRNAME",
    "LANG_FILE_SUFFIXES",
    "ModScanner",
    "is_lang_file",
    "lang_prefix_of",
    "normalize_candidates",
]
