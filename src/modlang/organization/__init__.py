"""Planning and execution of mod unit reorganization."""

from .executor import DRY_RUN_PREFIX, OperationExecutor
from .models import (
    BackupArchiveOperation,
    DeletePathOperation,
    EnsureDirectoryOperation,
    ExecutionOutcome,
    ExecutionPlan,
    ExtractArchiveEntryOperation,
    MoveWithOverwriteOperation,
    Operation,
    PlanPolicy,
    RunSummary,
    UnitOutcome,
    UnitStatus,
)
from .planner import BACKUP_SUFFIX, EXTRACTED_DIRNAME, OperationPlanner, extraction_dir_for
from .runner import BACKUP_DIRNAME, backup_root_for, preview_plans, run_units

__all__ = [
    "BACKUP_DIRNAME",
    "BACKUP_SUFFIX",
    "DRY_RUN_PREFIX",
    "EXTRACTED_DIRNAME",
    "BackupArchiveOperation",
    "DeletePathOperation",
    "EnsureDirectoryOperation",
    "ExecutionOutcome",
    "ExecutionPlan",
    "ExtractArchiveEntryOperation",
    "MoveWithOverwriteOperation",
    "Operation",
    "OperationExecutor",
    "OperationPlanner",
    "PlanPolicy",
    "RunSummary",
    "UnitOutcome",
    "UnitStatus",
    "backup_root_for",
    "extraction_dir_for",
    "preview_plans",
    "run_units",
]
