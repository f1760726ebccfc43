"""Planner turning scan results into ordered filesystem operations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from modlang.archive import ArchiveError, list_entries
from modlang.config.models import MultiLangMode, OrganizerOptions
from modlang.scanning import LANG_DIRNAME, ScanResult, is_lang_file

from .models import (
    BackupArchiveOperation,
    DeletePathOperation,
    EnsureDirectoryOperation,
    ExecutionPlan,
    ExtractArchiveEntryOperation,
    MoveWithOverwriteOperation,
    Operation,
    PlanPolicy,
)

LOGGER = logging.getLogger(__name__)

EXTRACTED_DIRNAME = "_extracted"
BACKUP_SUFFIX = ".zip"


def extraction_dir_for(archive_path: Path) -> Path:
    """Return `<parent>/_extracted/<archive stem>/lang` for an archive unit."""
    archive_path = Path(archive_path)
    return archive_path.parent / EXTRACTED_DIRNAME / archive_path.stem / LANG_DIRNAME


class OperationPlanner:
    """Derive execution plans from scan results and the run policy.

    Planning never mutates storage. It only lists directories and archive
    entries, and listing failures count as "no entries".
    """

    def build_plan(
        self,
        scan: ScanResult,
        options: OrganizerOptions,
        backup_root: Path | str | None = None,
    ) -> ExecutionPlan:
        """Produce the operation plan for a single mod unit.

        Args:
            scan: Scan result describing the unit.
            options: Run policy (selection mode and backup flag are consulted).
            backup_root: Folder receiving `<unit name>.zip` backups; backups are
                planned only when this is given and the policy enables them.

        Returns:
            ExecutionPlan: Ordered operations with planned move/delete counters.
        """
        operations: list[Operation] = []
        if options.backup_before_execute and backup_root:
            root = Path(backup_root)
            operations.append(EnsureDirectoryOperation(path=root))
            operations.append(
                BackupArchiveOperation(
                    source_directory=scan.unit_path,
                    archive_path=root / f"{scan.unit_name}{BACKUP_SUFFIX}",
                )
            )

        chosen = self._choose_candidates(scan.lang_candidates, options.multi_lang_mode)

        if scan.is_archive:
            return self._plan_archive(scan, chosen, operations)
        if chosen:
            return self._plan_lang_found(scan, chosen, operations)
        return self._plan_lang_missing(scan, operations)

    # ------------------------------------------------------------------ #
    # Branches                                                           #
    # ------------------------------------------------------------------ #

    def _plan_archive(
        self, scan: ScanResult, chosen: Sequence[str], operations: list[Operation]
    ) -> ExecutionPlan:
        if not chosen:
            return self._finish(scan, PlanPolicy.ARCHIVE_EMPTY, operations, 0, 0)

        destination = extraction_dir_for(scan.unit_path)
        operations.append(EnsureDirectoryOperation(path=destination))

        entries = self._safe_archive_entries(scan.unit_path)
        extractions = 0
        for prefix in chosen:
            folded = (prefix + "/").casefold()
            for entry in entries:
                normalized = entry.replace("\\", "/")
                if not normalized.casefold().startswith(folded):
                    continue
                file_name = normalized[len(prefix) + 1 :]
                if not file_name or "/" in file_name or not is_lang_file(file_name):
                    continue
                extractions += 1
                operations.append(
                    ExtractArchiveEntryOperation(
                        archive_path=scan.unit_path,
                        entry_path=entry,
                        destination_path=destination / file_name,
                    )
                )

        return self._finish(scan, PlanPolicy.ARCHIVE_EXTRACT, operations, extractions, 0)

    def _plan_lang_found(
        self, scan: ScanResult, chosen: Sequence[str], operations: list[Operation]
    ) -> ExecutionPlan:
        unit = scan.unit_path
        destination = unit / LANG_DIRNAME
        operations.append(EnsureDirectoryOperation(path=destination))

        moves = 0
        deletes = 0
        for candidate in self._outermost(chosen):
            for entry in self._safe_list(Path(candidate)):
                target = destination / entry.name
                moves += 1
                if target.exists() or target.is_symlink():
                    deletes += 1
                operations.append(MoveWithOverwriteOperation(source=entry, destination=target))

        for child in self._safe_list(unit):
            if child.name.casefold() == LANG_DIRNAME:
                continue
            deletes += 1
            operations.append(DeletePathOperation(path=child))

        return self._finish(scan, PlanPolicy.LANG_FOUND, operations, moves, deletes)

    def _plan_lang_missing(self, scan: ScanResult, operations: list[Operation]) -> ExecutionPlan:
        deletes = 0
        for child in self._safe_list(scan.unit_path):
            deletes += 1
            operations.append(DeletePathOperation(path=child))
        return self._finish(scan, PlanPolicy.LANG_MISSING, operations, 0, deletes)

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _finish(
        self,
        scan: ScanResult,
        policy: PlanPolicy,
        operations: list[Operation],
        moves: int,
        deletes: int,
    ) -> ExecutionPlan:
        LOGGER.debug(
            "Planned %s: %s, %d operation(s), moves=%d deletes=%d",
            scan.unit_name,
            policy.value,
            len(operations),
            moves,
            deletes,
        )
        return ExecutionPlan(
            unit_name=scan.unit_name,
            unit_path=scan.unit_path,
            source_kind=scan.source_kind,
            lang_candidates=scan.lang_candidates,
            policy=policy,
            operations=operations,
            planned_moves=moves,
            planned_deletes=deletes,
        )

    def _choose_candidates(self, candidates: Sequence[str], mode: MultiLangMode) -> list[str]:
        if not candidates:
            return []
        if mode == "merge_all":
            return list(candidates)
        return [candidates[0]]

    def _outermost(self, candidates: Sequence[str]) -> list[str]:
        """Drop folder candidates nested under another one; they move with their parent."""
        kept: list[str] = []
        for candidate in candidates:
            folded = Path(candidate).as_posix().casefold()
            if any(
                folded.startswith(Path(parent).as_posix().casefold().rstrip("/") + "/")
                for parent in candidates
                if parent != candidate
            ):
                continue
            kept.append(candidate)
        return kept

    def _safe_list(self, directory: Path) -> list[Path]:
        try:
            return sorted(directory.iterdir(), key=lambda path: path.name.casefold())
        except OSError:
            return []

    def _safe_archive_entries(self, archive: Path) -> list[str]:
        try:
            return list_entries(archive)
        except ArchiveError:
            return []


__all__ = ["BACKUP_SUFFIX", "EXTRACTED_DIRNAME", "OperationPlanner", "extraction_dir_for"]
