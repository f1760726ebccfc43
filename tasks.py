"""Invoke tasks for testing, linting, and manual dry runs.

Commands shell out to the `uv` CLI so local workflows match CI.
"""

from __future__ import annotations

import json
import shlex
import shutil
import zipfile
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
SAMPLE_DIR = PROJECT_ROOT / "build" / "sample-mods"


def _run_uv(ctx: Context, args: Sequence[str], *, dry_run: bool = False) -> None:
    """Execute a uv command, or only print it when ``dry_run`` is set.

    Args:
        ctx: Invoke execution context.
        args: Arguments appended after the `uv` executable.
        dry_run: When True, log the command without executing it.
    """
    command = shlex.join(("uv", *args))
    if dry_run:
        print(f"[dry-run] {command}")
        return
    ctx.run(command, echo=True, pty=True)


@task
def sync(ctx: Context, dev: bool = True) -> None:
    """Synchronize the virtual environment, including dev extras by default."""
    args = ["sync"]
    if dev:
        args.extend(["--extra", "dev"])
    _run_uv(ctx, args)


@task(help={"clean": "Remove existing artifacts from dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build source and wheel distributions in `dist/`."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _run_uv(ctx, ["build"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "path": "Path or module to test (defaults to tests/).",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests") -> None:
    """Run the pytest suite."""
    args: list[str] = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    args.append(path)
    _run_uv(ctx, args)


@task(help={"fix": "Apply auto-fixes where possible (ruff --fix)."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _run_uv(ctx, ["run", "ruff", "format", "--check", "src", "tests"])
    args = ["run", "ruff", "check", "src", "tests"]
    if fix:
        args.append("--fix")
    _run_uv(ctx, args)


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _run_uv(ctx, ["run", "mypy", "src"])


@task(help={"target": "Directory to (re)create the sample mod tree in."})
def sample(ctx: Context, target: str = str(SAMPLE_DIR)) -> None:
    """Create a throwaway mod tree for trying `modlang plan` and `modlang run --dry-run`.

    The tree holds one folder mod with `assets/<id>/lang`, one folder mod
    without any lang folder, and one `.jar` with a lang folder.
    """
    root = Path(target)
    if root.exists():
        shutil.rmtree(root)

    lang = root / "alpha" / "assets" / "alpha" / "lang"
    lang.mkdir(parents=True)
    (lang / "en_us.json").write_text(json.dumps({"item.alpha": "Alpha"}), encoding="utf-8")
    (lang / "ja_jp.json").write_text(json.dumps({"item.alpha": "アルファ"}), encoding="utf-8")
    (root / "alpha" / "assets" / "alpha" / "textures").mkdir()
    (root / "alpha" / "pack.mcmeta").write_text("{}", encoding="utf-8")

    (root / "bravo" / "config").mkdir(parents=True)
    (root / "bravo" / "config" / "bravo.toml").write_text("enabled = true\n", encoding="utf-8")

    with zipfile.ZipFile(root / "charlie.jar", "w") as archive:
        archive.writestr("assets/charlie/lang/en_us.json", "{}")
        archive.writestr("assets/charlie/textures/block.png", b"")
        archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")

    print(f"Sample mods written to {root}")


@task
def ci(ctx: Context) -> None:
    """Replicate the CI workflow locally."""
    lint(ctx)
    mypy(ctx)
    tests(ctx)


namespace = Collection(sync, build, tests, lint, mypy, sample, ci)
