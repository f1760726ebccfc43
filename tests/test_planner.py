"""Tests for operation planning."""

from __future__ import annotations

import os
import zipfile
from pathlib import Path

from modlang.config import OrganizerOptions
from modlang.organization import (
    BackupArchiveOperation,
    DeletePathOperation,
    EnsureDirectoryOperation,
    ExtractArchiveEntryOperation,
    MoveWithOverwriteOperation,
    OperationPlanner,
    PlanPolicy,
    extraction_dir_for,
)
from modlang.scanning import ModScanner, ScanResult


def _touch(path: Path, text: str = "{}") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _snapshot(root: Path) -> list[str]:
    entries: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            entries.append(str(Path(dirpath, name).relative_to(root)))
    return sorted(entries)


def _scan_one(root: Path, include_archives: bool = False) -> ScanResult:
    results = ModScanner().scan(root, include_archives=include_archives)
    assert len(results) == 1
    return results[0]


def test_single_assets_candidate_plan(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    source = _touch(unit / "assets" / "moda" / "lang" / "en_us.json")
    _touch(unit / "pack.mcmeta")

    plan = OperationPlanner().build_plan(_scan_one(tmp_path), OrganizerOptions())

    assert plan.policy is PlanPolicy.LANG_FOUND
    assert plan.operations == [
        EnsureDirectoryOperation(path=unit / "lang"),
        MoveWithOverwriteOperation(source=source, destination=unit / "lang" / "en_us.json"),
        DeletePathOperation(path=unit / "assets"),
        DeletePathOperation(path=unit / "pack.mcmeta"),
    ]
    assert plan.planned_moves == 1
    assert plan.planned_deletes == 2


def test_existing_lang_folder_is_kept_and_overwrites_counted(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    _touch(unit / "lang" / "en_us.json", "old")
    _touch(unit / "assets" / "moda" / "lang" / "en_us.json", "new")
    _touch(unit / "assets" / "moda" / "lang" / "ja_jp.json", "new")

    plan = OperationPlanner().build_plan(_scan_one(tmp_path), OrganizerOptions())

    deleted = [op.path for op in plan.operations if isinstance(op, DeletePathOperation)]
    assert deleted == [unit / "assets"]
    assert plan.planned_moves == 2
    # one real delete plus the overwritten en_us.json
    assert plan.planned_deletes == 2


def test_unit_without_candidates_is_emptied(tmp_path: Path) -> None:
    unit = tmp_path / "bravo"
    _touch(unit / "config" / "bravo.toml", "x = 1")
    _touch(unit / "README.txt", "hello")

    plan = OperationPlanner().build_plan(_scan_one(tmp_path), OrganizerOptions())

    assert plan.policy is PlanPolicy.LANG_MISSING
    assert plan.operations == [
        DeletePathOperation(path=unit / "config"),
        DeletePathOperation(path=unit / "README.txt"),
    ]
    assert plan.planned_moves == 0
    assert plan.planned_deletes == 2


def test_first_only_versus_merge_all(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    first = _touch(unit / "assets" / "a_mod" / "lang" / "en_us.json")
    second = _touch(unit / "assets" / "b_mod" / "lang" / "de_de.json")
    scan = _scan_one(tmp_path)
    planner = OperationPlanner()

    first_only = planner.build_plan(scan, OrganizerOptions(multi_lang_mode="first_only"))
    merge_all = planner.build_plan(scan, OrganizerOptions(multi_lang_mode="merge_all"))

    first_sources = [
        op.source for op in first_only.operations if isinstance(op, MoveWithOverwriteOperation)
    ]
    merged_sources = [
        op.source for op in merge_all.operations if isinstance(op, MoveWithOverwriteOperation)
    ]
    assert first_sources == [first]
    assert merged_sources == [first, second]
    assert merge_all.planned_moves == 2


def test_merge_all_keeps_last_writer(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    _touch(unit / "assets" / "a_mod" / "lang" / "en_us.json", "a")
    later = _touch(unit / "assets" / "b_mod" / "lang" / "en_us.json", "b")

    plan = OperationPlanner().build_plan(
        _scan_one(tmp_path), OrganizerOptions(multi_lang_mode="merge_all")
    )

    moves = [op for op in plan.operations if isinstance(op, MoveWithOverwriteOperation)]
    assert [move.destination for move in moves] == [unit / "lang" / "en_us.json"] * 2
    assert moves[-1].source == later


def test_backup_operations_are_prepended(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    _touch(unit / "assets" / "moda" / "lang" / "en_us.json")
    backup_root = tmp_path / "_backup" / "20240101_000000"
    scan = _scan_one(tmp_path)
    planner = OperationPlanner()

    for dry_run in (False, True):
        options = OrganizerOptions(backup_before_execute=True, dry_run=dry_run)
        plan = planner.build_plan(scan, options, backup_root=backup_root)
        assert plan.operations[:2] == [
            EnsureDirectoryOperation(path=backup_root),
            BackupArchiveOperation(source_directory=unit, archive_path=backup_root / "alpha.zip"),
        ]

    without_root = planner.build_plan(scan, OrganizerOptions(backup_before_execute=True))
    assert not any(isinstance(op, BackupArchiveOperation) for op in without_root.operations)

    disabled = planner.build_plan(scan, OrganizerOptions(), backup_root=backup_root)
    assert not any(isinstance(op, BackupArchiveOperation) for op in disabled.operations)


def test_archive_plan_extracts_direct_files_only(tmp_path: Path) -> None:
    jar = tmp_path / "modb.jar"
    with zipfile.ZipFile(jar, "w") as archive:
        archive.writestr("assets/modB/lang/en_us.json", "{}")
        archive.writestr("assets/modB/lang/sub/extra.json", "{}")
        archive.writestr("assets/modB/lang/notes.txt", "")

    plan = OperationPlanner().build_plan(_scan_one(tmp_path, include_archives=True), OrganizerOptions())

    destination = tmp_path / "_extracted" / "modb" / "lang"
    assert extraction_dir_for(jar) == destination
    assert plan.policy is PlanPolicy.ARCHIVE_EXTRACT
    assert plan.operations == [
        EnsureDirectoryOperation(path=destination),
        ExtractArchiveEntryOperation(
            archive_path=jar,
            entry_path="assets/modB/lang/en_us.json",
            destination_path=destination / "en_us.json",
        ),
    ]
    assert plan.planned_moves == 1
    assert plan.planned_deletes == 0


def test_archive_without_candidates_plans_nothing(tmp_path: Path) -> None:
    with zipfile.ZipFile(tmp_path / "lib.jar", "w") as archive:
        archive.writestr("com/example/Lib.class", "")

    plan = OperationPlanner().build_plan(_scan_one(tmp_path, include_archives=True), OrganizerOptions())

    assert plan.policy is PlanPolicy.ARCHIVE_EMPTY
    assert plan.operations == []
    assert plan.planned_moves == 0


def test_planning_does_not_touch_the_filesystem(tmp_path: Path) -> None:
    _touch(tmp_path / "alpha" / "assets" / "moda" / "lang" / "en_us.json")
    _touch(tmp_path / "bravo" / "config.toml")
    before = _snapshot(tmp_path)
    options = OrganizerOptions(backup_before_execute=True, multi_lang_mode="merge_all")

    planner = OperationPlanner()
    for scan in ModScanner().scan(tmp_path):
        planner.build_plan(scan, options, backup_root=tmp_path / "_backup" / "now")

    assert _snapshot(tmp_path) == before


def test_vanished_candidate_contributes_no_moves(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    _touch(unit / "keep.txt")
    scan = ScanResult(
        unit_name="alpha",
        unit_path=unit,
        lang_candidates=(str(unit / "assets" / "gone" / "lang"),),
    )

    plan = OperationPlanner().build_plan(scan, OrganizerOptions())

    assert plan.operations == [
        EnsureDirectoryOperation(path=unit / "lang"),
        DeletePathOperation(path=unit / "keep.txt"),
    ]
    assert plan.planned_moves == 0


def test_describe_lines() -> None:
    move = MoveWithOverwriteOperation(source=Path("/m/a.json"), destination=Path("/m/lang/a.json"))
    extract = ExtractArchiveEntryOperation(
        archive_path=Path("/m.jar"), entry_path="assets/m/lang/a.json", destination_path=Path("/x/a.json")
    )

    assert move.describe() == "MOVE   /m/a.json -> /m/lang/a.json (overwrite)"
    assert extract.describe() == "EXTRACT /m.jar!assets/m/lang/a.json -> /x/a.json"
    assert DeletePathOperation(path=Path("/m/x")).describe() == "DELETE /m/x"
    assert EnsureDirectoryOperation(path=Path("/m/lang")).describe() == "MKDIR  /m/lang"


def test_merge_all_skips_lang_folder_nested_in_another(tmp_path: Path) -> None:
    unit = tmp_path / "alpha"
    outer = unit / "src" / "lang"
    _touch(outer / "en_us.json")
    _touch(outer / "x" / "lang" / "de_de.json")
    scan = _scan_one(tmp_path)
    assert scan.lang_candidates == (str(outer), str(outer / "x" / "lang"))

    plan = OperationPlanner().build_plan(scan, OrganizerOptions(multi_lang_mode="merge_all"))

    sources = [op.source for op in plan.operations if isinstance(op, MoveWithOverwriteOperation)]
    assert sources == [outer / "en_us.json", outer / "x"]
    assert plan.planned_moves == 2
