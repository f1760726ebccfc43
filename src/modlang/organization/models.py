"""Operation and execution plan data models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from modlang.scanning.models import SourceKind


class _Operation(BaseModel):
    model_config = ConfigDict(frozen=True)

    def describe(self) -> str:  # pragma: no cover - overridden by every variant
        raise NotImplementedError


class EnsureDirectoryOperation(_Operation):
    """Create a directory and its parents."""

    kind: Literal["ensure_directory"] = "ensure_directory"
    path: Path

    def describe(self) -> str:
        return f"MKDIR  {self.path}"


class MoveWithOverwriteOperation(_Operation):
    """Move a file or directory, replacing any existing destination."""

    kind: Literal["move_with_overwrite"] = "move_with_overwrite"
    source: Path
    destination: Path

    def describe(self) -> str:
        return f"MOVE   {self.source} -> {self.destination} (overwrite)"


class DeletePathOperation(_Operation):
    """Delete a file or directory tree."""

    kind: Literal["delete_path"] = "delete_path"
    path: Path

    def describe(self) -> str:
        return f"DELETE {self.path}"


class BackupArchiveOperation(_Operation):
    """Zip a mod unit into the backup folder before it is modified."""

    kind: Literal["backup_archive"] = "backup_archive"
    source_directory: Path
    archive_path: Path

    def describe(self) -> str:
        return f"ZIP    {self.source_directory} -> {self.archive_path}"


class ExtractArchiveEntryOperation(_Operation):
    """Copy one archive entry out to a file."""

    kind: Literal["extract_archive_entry"] = "extract_archive_entry"
    archive_path: Path
    entry_path: str
    destination_path: Path

    def describe(self) -> str:
        return f"EXTRACT {self.archive_path}!{self.entry_path} -> {self.destination_path}"


Operation = Annotated[
    Union[
        EnsureDirectoryOperation,
        MoveWithOverwriteOperation,
        DeletePathOperation,
        BackupArchiveOperation,
        ExtractArchiveEntryOperation,
    ],
    Field(discriminator="kind"),
]


class PlanPolicy(str, Enum):
    """Planning branch applied to a unit; values are display labels."""

    LANG_FOUND = "A (lang found)"
    LANG_MISSING = "B (no lang: purge contents)"
    ARCHIVE_EXTRACT = "archive (lang extracted)"
    ARCHIVE_EMPTY = "archive (no lang)"


class ExecutionPlan(BaseModel):
    """Ordered operations for one mod unit plus preview counters.

    Attributes:
        unit_name: Display name of the unit.
        unit_path: Folder or archive the plan was built for.
        source_kind: Unit kind the plan was built for.
        lang_candidates: Candidates recorded by the scan.
        policy: Planning branch that produced the operations.
        operations: Operations in execution order.
        planned_moves: Moves (or extractions) the plan will perform.
        planned_deletes: Deletions, including destinations a move will overwrite.
    """

    model_config = ConfigDict(frozen=True)

    unit_name: str
    unit_path: Path
    source_kind: SourceKind = "folder"
    lang_candidates: Tuple[str, ...] = ()
    policy: PlanPolicy
    operations: List[Operation] = Field(default_factory=list)
    planned_moves: int = 0
    planned_deletes: int = 0

    @property
    def policy_label(self) -> str:
        return self.policy.value

    def describe(self) -> list[str]:
        """Return one description line per operation."""
        return [operation.describe() for operation in self.operations]


class ExecutionOutcome(BaseModel):
    """Result of executing one plan.

    Attributes:
        applied: Number of operations handled (logged, and applied unless dry-run).
        cancelled: Whether cancellation stopped the plan before its end.
    """

    applied: int = 0
    cancelled: bool = False


class UnitStatus(str, Enum):
    """Per-unit status reported by a run."""

    UNPROCESSED = "unprocessed"
    SUCCESS = "success"
    WARNING = "warning"
    FAILED = "failed"
    CANCELLED = "cancelled"


class UnitOutcome(BaseModel):
    """Status of one unit after a run."""

    unit_name: str
    unit_path: Path
    status: UnitStatus = UnitStatus.UNPROCESSED
    planned_moves: int = 0
    planned_deletes: int = 0
    error: Optional[str] = None


class RunSummary(BaseModel):
    """Aggregated outcome of running every plan for a target directory."""

    target_dir: Path
    dry_run: bool = False
    backup_root: Optional[Path] = None
    outcomes: List[UnitOutcome] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Return the number of units per status, in status declaration order."""
        tally = {status.value: 0 for status in UnitStatus}
        for outcome in self.outcomes:
            tally[outcome.status.value] += 1
        return tally

    @property
    def failed(self) -> bool:
        return any(outcome.status is UnitStatus.FAILED for outcome in self.outcomes)


__all__ = [
    "BackupArchiveOperation",
    "DeletePathOperation",
    "EnsureDirectoryOperation",
    "ExecutionOutcome",
    "ExecutionPlan",
    "ExtractArchiveEntryOperation",
    "MoveWithOverwriteOperation",
    "Operation",
    "PlanPolicy",
    "RunSummary",
    "UnitOutcome",
    "UnitStatus",
]
