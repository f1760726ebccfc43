"""Executor applying execution plans through the storage primitives."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from modlang.config.models import OrganizerOptions
from modlang.storage import FileSystem

from .models import (
    BackupArchiveOperation,
    DeletePathOperation,
    EnsureDirectoryOperation,
    ExecutionOutcome,
    ExecutionPlan,
    ExtractArchiveEntryOperation,
    MoveWithOverwriteOperation,
    Operation,
)

LogCallback = Callable[[str], None]

DRY_RUN_PREFIX = "[DRY-RUN] "


class OperationExecutor:
    """Apply a plan's operations in order, one at a time."""

    def __init__(self, filesystem: FileSystem | None = None) -> None:
        self._fs = filesystem or FileSystem()

    def execute(
        self,
        plan: ExecutionPlan,
        options: OrganizerOptions,
        log_info: LogCallback,
        log_warn: LogCallback,
        log_error: LogCallback,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionOutcome:
        """Run every operation of ``plan``.

        Each operation is logged before it is applied. Under dry-run nothing is
        applied. Cancellation is checked between operations and ends the plan
        without raising; operations already applied stay applied.

        Args:
            plan: Plan produced by the planner.
            options: Run policy (dry-run flag and delete mode are consulted).
            log_info: Receives one line per operation.
            log_warn: Receives warnings about skipped operations.
            log_error: Receives the failing operation before the error propagates.
            cancel_event: Optional event signalling cancellation.

        Returns:
            ExecutionOutcome: Number of handled operations and whether the plan
                was cancelled.

        Raises:
            Exception: Whatever the failing storage primitive raised.
        """
        prefix = DRY_RUN_PREFIX if options.dry_run else ""
        applied = 0

        for operation in plan.operations:
            if cancel_event is not None and cancel_event.is_set():
                return ExecutionOutcome(applied=applied, cancelled=True)

            log_info(prefix + operation.describe())
            applied += 1
            if options.dry_run:
                continue

            try:
                self._apply(operation, options, log_warn)
            except Exception as exc:
                log_error(f"Operation failed: {operation.describe()} / {exc}")
                raise

        return ExecutionOutcome(applied=applied, cancelled=False)

    def _apply(
        self, operation: Operation, options: OrganizerOptions, log_warn: LogCallback
    ) -> None:
        if isinstance(operation, EnsureDirectoryOperation):
            self._fs.ensure_directory(operation.path)
        elif isinstance(operation, MoveWithOverwriteOperation):
            self._fs.move_with_overwrite(
                operation.source, operation.destination, options.delete_mode
            )
        elif isinstance(operation, DeletePathOperation):
            self._fs.delete_path(operation.path, options.delete_mode)
        elif isinstance(operation, BackupArchiveOperation):
            self._fs.backup_archive(operation.source_directory, operation.archive_path)
        elif isinstance(operation, ExtractArchiveEntryOperation):
            self._fs.extract_archive_entry(
                operation.archive_path, operation.entry_path, operation.destination_path
            )
        else:
            log_warn(f"Unknown operation: {getattr(operation, 'kind', type(operation).__name__)}")


__all__ = ["DRY_RUN_PREFIX", "LogCallback", "OperationExecutor"]
