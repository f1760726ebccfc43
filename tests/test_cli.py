"""CLI tests for scanning, planning, and running."""

import json
import os
import zipfile
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from modlang.cli import cli
from modlang.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("MODLANG__")}
    env["HOME"] = str(tmp_path / "home")
    return env


def _build_mods(root: Path) -> Path:
    lang = root / "alpha" / "assets" / "alpha" / "lang"
    lang.mkdir(parents=True)
    (lang / "en_us.json").write_text('{"a": "A"}', encoding="utf-8")
    (root / "alpha" / "pack.mcmeta").write_text("{}", encoding="utf-8")
    (root / "bravo" / "config").mkdir(parents=True)
    (root / "bravo" / "config" / "bravo.toml").write_text("x = 1", encoding="utf-8")
    with zipfile.ZipFile(root / "charlie.jar", "w") as archive:
        archive.writestr("assets/charlie/lang/en_us.json", "{}")
    return root


def test_cli_help_lists_commands() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("scan", "plan", "run", "config"):
        assert command in result.output


def test_scan_json_reports_units(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()

    result = runner.invoke(cli, ["scan", str(mods), "--archives", "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["context"]["include_archives"] is True
    units = {unit["unit_name"]: unit for unit in payload["units"]}
    assert list(units) == ["alpha", "bravo", "charlie.jar"]
    assert units["alpha"]["policy"] == "A (lang found)"
    assert units["bravo"]["lang_candidates"] == []
    assert units["charlie.jar"]["source_kind"] == "archive"
    assert units["charlie.jar"]["lang_candidates"] == ["assets/charlie/lang"]


def test_scan_remembers_target(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    first = runner.invoke(cli, ["scan", str(mods), "--summary"], env=env)
    second = runner.invoke(cli, ["scan", "--json"], env=env)

    assert first.exit_code == 0, first.output
    assert "Scan summary" in first.output
    assert second.exit_code == 0, second.output
    payload = json.loads(second.output)
    assert Path(payload["context"]["target_dir"]) == mods.resolve()

    manager = ConfigManager(config_path=tmp_path / "home" / ".modlang" / "config.yaml")
    assert manager.load(include_env=False).organizer.target_dir == str(mods.resolve())


def test_scan_without_target_fails(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["scan", "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "invalid_input"


def test_plan_json_lists_operations(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()

    result = runner.invoke(
        cli, ["plan", str(mods), "--backup", "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["context"]["options"]["backup_before_execute"] is True
    alpha = payload["plans"][0]
    kinds = [operation["kind"] for operation in alpha["operations"]]
    assert kinds == ["ensure_directory", "move_with_overwrite", "delete_path", "delete_path"]
    assert (mods / "bravo" / "config" / "bravo.toml").exists()


def test_plan_text_output(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()

    result = runner.invoke(cli, ["plan", str(mods)], env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    assert "MKDIR" in result.output
    assert "DELETE" in result.output
    assert "Plan summary" in result.output


def test_run_dry_run_leaves_tree_untouched(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()

    result = runner.invoke(cli, ["run", str(mods), "--dry-run", "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["dry_run"] is True
    assert payload["counts"]["success"] == 1
    assert payload["counts"]["warning"] == 1
    assert any(entry["message"].startswith("[DRY-RUN] ") for entry in payload["log"])
    assert (mods / "bravo" / "config" / "bravo.toml").exists()
    assert not (mods / "alpha" / "lang").exists()


def test_run_json_requires_yes(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()

    result = runner.invoke(cli, ["run", str(mods), "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "invalid_input"
    assert (mods / "bravo" / "config").exists()


def test_run_declined_prompt_changes_nothing(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()

    result = runner.invoke(cli, ["run", str(mods)], input="n\n", env=_env_with_home(tmp_path))

    assert result.exit_code == 0, result.output
    assert "Proceed?" in result.output
    assert "nothing was changed" in result.output
    assert (mods / "bravo" / "config" / "bravo.toml").exists()


def test_run_executes_with_backup_and_log_file(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    log_path = tmp_path / "logs" / "run.txt"
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["run", str(mods), "--yes", "--backup", "--archives", "--log-file", str(log_path)],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0, result.output
    assert "Run summary" in result.output
    assert sorted(child.name for child in (mods / "alpha").iterdir()) == ["lang"]
    assert (mods / "alpha" / "lang" / "en_us.json").read_text(encoding="utf-8") == '{"a": "A"}'
    assert list((mods / "bravo").iterdir()) == []
    assert (mods / "charlie.jar").exists()
    assert (mods / "_extracted" / "charlie" / "lang" / "en_us.json").exists()

    backups = list((mods / "_backup").iterdir())
    assert len(backups) == 1
    assert sorted(p.name for p in backups[0].iterdir()) == [
        "alpha.zip",
        "bravo.zip",
        "charlie.jar.zip",
    ]

    exported = log_path.read_text(encoding="utf-8")
    assert "\tINFO\tExecute start" in exported
    assert "Summary: success=2, warning=1, failed=0, cancelled=0" in exported


def test_run_second_pass_skips_working_folders(tmp_path: Path) -> None:
    mods = _build_mods(tmp_path / "mods")
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    runner.invoke(cli, ["run", str(mods), "--yes", "--backup", "--summary"], env=env)
    result = runner.invoke(cli, ["run", str(mods), "--yes", "--json"], env=env)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [outcome["unit_name"] for outcome in payload["outcomes"]] == ["alpha", "bravo"]
    assert (mods / "_backup").exists()
