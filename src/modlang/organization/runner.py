"""Per-unit run loop: plan, execute, and tally each scanned mod unit."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from modlang.config.models import OrganizerOptions
from modlang.runlog import RunLog
from modlang.scanning import ScanResult

from .executor import OperationExecutor
from .models import ExecutionPlan, RunSummary, UnitOutcome, UnitStatus
from .planner import OperationPlanner

BACKUP_DIRNAME = "_backup"

ProgressCallback = Callable[[float, str], None]


def backup_root_for(target_dir: Path, now: Optional[datetime] = None) -> Path:
    """Return the per-run backup folder `<target>/_backup/<YYYYMMDD_HHMMSS>`."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(target_dir) / BACKUP_DIRNAME / stamp


def preview_plans(
    results: Sequence[ScanResult],
    options: OrganizerOptions,
    planner: Optional[OperationPlanner] = None,
) -> list[ExecutionPlan]:
    """Build plans for display only; backups are left out of previews."""
    planner = planner or OperationPlanner()
    return [planner.build_plan(scan, options, backup_root=None) for scan in results]


def run_units(
    results: Sequence[ScanResult],
    options: OrganizerOptions,
    target_dir: Path,
    log: RunLog,
    *,
    cancel_event: Optional[threading.Event] = None,
    progress: Optional[ProgressCallback] = None,
    planner: Optional[OperationPlanner] = None,
    executor: Optional[OperationExecutor] = None,
    now: Optional[datetime] = None,
) -> RunSummary:
    """Plan and execute every scanned unit in order.

    A unit whose plan raises is marked failed and the loop moves on. Once
    cancellation is observed the current unit stops between operations and
    every unit not yet reached is marked cancelled.

    Args:
        results: Scan results, in processing order.
        options: Run policy.
        target_dir: Directory the units were scanned from.
        log: Run log receiving executor and summary lines.
        cancel_event: Optional event signalling cancellation.
        progress: Optional callback receiving a 0..1 fraction and a label.
        planner: Planner override, mainly for tests.
        executor: Executor override, mainly for tests.
        now: Timestamp used for the backup folder name.

    Returns:
        RunSummary: Per-unit outcomes plus the backup folder used, if any.
    """
    planner = planner or OperationPlanner()
    executor = executor or OperationExecutor()
    backup_root = backup_root_for(target_dir, now) if options.backup_before_execute else None

    outcomes = [UnitOutcome(unit_name=scan.unit_name, unit_path=scan.unit_path) for scan in results]
    summary = RunSummary(
        target_dir=Path(target_dir),
        dry_run=options.dry_run,
        backup_root=backup_root,
        outcomes=outcomes,
    )

    log.info("Execute start")
    total = len(results)
    for index, scan in enumerate(results):
        outcome = outcomes[index]
        if cancel_event is not None and cancel_event.is_set():
            log.warn("Cancel detected. Remaining mods were not processed.")
            for pending in outcomes[index:]:
                pending.status = UnitStatus.CANCELLED
            break

        if progress is not None:
            progress(index / total, f"{scan.unit_name} ({index + 1}/{total})")

        plan = planner.build_plan(scan, options, backup_root)
        outcome.planned_moves = plan.planned_moves
        outcome.planned_deletes = plan.planned_deletes

        try:
            result = executor.execute(
                plan,
                options,
                log_info=log.info,
                log_warn=log.warn,
                log_error=log.error,
                cancel_event=cancel_event,
            )
        except Exception as exc:
            outcome.status = UnitStatus.FAILED
            outcome.error = str(exc)
            log.error(f"Mod failed: {scan.unit_name} / {exc}")
            continue

        if result.cancelled:
            outcome.status = UnitStatus.CANCELLED
        elif not plan.lang_candidates:
            outcome.status = UnitStatus.WARNING
        else:
            outcome.status = UnitStatus.SUCCESS

    if progress is not None:
        progress(1.0, "done")

    counts = summary.counts()
    log.info(
        f"Summary: success={counts['success']}, warning={counts['warning']}, "
        f"failed={counts['failed']}, cancelled={counts['cancelled']}"
    )
    return summary


__all__ = ["BACKUP_DIRNAME", "ProgressCallback", "backup_root_for", "preview_plans", "run_units"]
