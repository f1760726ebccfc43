"""Command line interface for modlang."""

from __future__ import annotations

import difflib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from modlang.config import (
    ConfigError,
    ConfigManager,
    LoggingSettings,
    ModlangConfig,
    resolve_with_precedence,
)
from modlang.organization import (
    ExecutionPlan,
    RunSummary,
    UnitStatus,
    preview_plans,
    run_units,
)
from modlang.runlog import LogEntry, RunLog
from modlang.scanning import ModScanner, ScanResult

console = Console()

T = TypeVar("T")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LEVEL_STYLES = {"info": "", "warn": "yellow", "error": "red"}
_STATUS_STYLES = {
    UnitStatus.SUCCESS: "green",
    UnitStatus.WARNING: "yellow",
    UnitStatus.FAILED: "red",
    UnitStatus.CANCELLED: "magenta",
    UnitStatus.UNPROCESSED: "dim",
}


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    if summary_only and mode not in {"summary", "warning", "error"}:
        return

    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands."""

    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {parts}.[/green]"


def _configure_logging(settings: LoggingSettings, *, verbose: bool) -> None:
    """Attach handlers to the package logger according to the settings.

    Args:
        settings: Logging section of the configuration.
        verbose: Also log DEBUG records to stderr.
    """

    logger = logging.getLogger("modlang")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if verbose else logging.getLevelName(settings.level.upper())
    logger.setLevel(level if isinstance(level, int) else logging.WARNING)

    formatter = logging.Formatter(_LOG_FORMAT)
    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    if verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())


def _output_modes(
    ctx: click.Context, config: ModlangConfig, *, quiet: bool, summary_mode: bool, json_output: bool
) -> tuple[bool, bool]:
    """Resolve quiet/summary modes from flags and configured defaults.

    Returns:
        tuple[bool, bool]: The effective quiet and summary-only flags.

    Raises:
        click.ClickException: If incompatible modes are requested.
    """

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _policy_overrides(
    *,
    dry_run: Optional[bool] = None,
    include_archives: Optional[bool] = None,
    merge_all: Optional[bool] = None,
    recycle: Optional[bool] = None,
    backup: Optional[bool] = None,
) -> dict[str, Any]:
    """Translate explicitly supplied policy flags into dotted config overrides."""

    overrides: dict[str, Any] = {}
    if dry_run is not None:
        overrides["organizer.dry_run"] = dry_run
    if include_archives is not None:
        overrides["organizer.include_archives"] = include_archives
    if merge_all is not None:
        overrides["organizer.multi_lang_mode"] = "merge_all" if merge_all else "first_only"
    if recycle is not None:
        overrides["organizer.delete_mode"] = "recycle" if recycle else "permanent"
    if backup is not None:
        overrides["organizer.backup_before_execute"] = backup
    return overrides


def _load_config(ctx: click.Context, overrides: dict[str, Any]) -> tuple[ConfigManager, ModlangConfig]:
    """Load configuration with CLI overrides and configure logging."""

    manager = ConfigManager()
    manager.ensure_exists()
    config = manager.load(cli_overrides=overrides)
    verbose = bool((ctx.find_root().obj or {}).get("verbose"))
    _configure_logging(config.logging, verbose=verbose)
    return manager, config


def _resolve_target(target: Optional[str], config: ModlangConfig) -> Path:
    """Return the target directory from the argument or the remembered value.

    Raises:
        click.ClickException: If no target is known or it is not a directory.
    """

    raw = target or config.organizer.target_dir
    if not raw:
        raise click.ClickException(
            "No TARGET given and no target directory remembered in the configuration."
        )
    path = Path(raw).expanduser().resolve()
    if not path.is_dir():
        raise click.ClickException(f"Target directory does not exist: {path}")
    return path


def _run_worker(work: Callable[[], T], cancel_event: threading.Event, *, announce: bool) -> T:
    """Run ``work`` on a background worker; Ctrl+C requests cooperative cancellation.

    Args:
        work: Callable performing the scan or execution.
        cancel_event: Event set when the user interrupts.
        announce: Print a notice when cancellation is requested.

    Returns:
        T: Whatever ``work`` returned.
    """

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="modlang-worker") as pool:
        future = pool.submit(work)
        while True:
            try:
                return future.result(timeout=0.2)
            except FutureTimeout:
                continue
            except KeyboardInterrupt:
                cancel_event.set()
                if announce:
                    console.print(
                        "[yellow]Cancel requested; stopping after the current step.[/yellow]"
                    )


def _scan_target(
    target_root: Path, include_archives: bool, *, announce: bool
) -> tuple[list[ScanResult], bool]:
    """Scan ``target_root`` in the background.

    Returns:
        tuple[list[ScanResult], bool]: Results and whether the scan was cancelled.
    """

    cancel_event = threading.Event()
    scanner = ModScanner()
    results = _run_worker(
        lambda: scanner.scan(
            target_root, include_archives, should_stop=lambda _path: cancel_event.is_set()
        ),
        cancel_event,
        announce=announce,
    )
    return results, cancel_event.is_set()


def _plan_payload(scan: ScanResult, plan: ExecutionPlan) -> dict[str, Any]:
    return {
        "unit_name": scan.unit_name,
        "unit_path": scan.unit_path.as_posix(),
        "source_kind": scan.source_kind,
        "has_assets_root": scan.has_assets_root,
        "lang_candidates": list(scan.lang_candidates),
        "policy": plan.policy_label,
        "planned_moves": plan.planned_moves,
        "planned_deletes": plan.planned_deletes,
    }


def _scan_table(target_root: Path, pairs: list[tuple[ScanResult, ExecutionPlan]]) -> Table:
    table = Table(title=f"Mod units in {escape(str(target_root))}")
    table.add_column("Unit", overflow="fold")
    table.add_column("Kind")
    table.add_column("Assets")
    table.add_column("Lang", justify="right")
    table.add_column("Policy")
    table.add_column("Moves", justify="right")
    table.add_column("Deletes", justify="right")
    for scan, plan in pairs:
        table.add_row(
            escape(scan.unit_name),
            scan.source_kind,
            "yes" if scan.has_assets_root else "no",
            str(scan.lang_count),
            escape(plan.policy_label),
            str(plan.planned_moves),
            str(plan.planned_deletes),
        )
    return table


def _summary_table(summary: RunSummary) -> Table:
    table = Table(title=f"Run results for {escape(str(summary.target_dir))}")
    table.add_column("Unit", overflow="fold")
    table.add_column("Status")
    table.add_column("Moves", justify="right")
    table.add_column("Deletes", justify="right")
    table.add_column("Error", overflow="fold")
    for outcome in summary.outcomes:
        style = _STATUS_STYLES[outcome.status]
        table.add_row(
            escape(outcome.unit_name),
            f"[{style}]{outcome.status.value}[/{style}]",
            str(outcome.planned_moves),
            str(outcome.planned_deletes),
            escape(outcome.error or ""),
        )
    return table


def _policy_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the shared run policy flags to a command."""

    options = [
        click.option(
            "--dry-run/--no-dry-run",
            default=None,
            help="Log operations without touching the filesystem.",
        ),
        click.option(
            "--archives/--no-archives",
            "include_archives",
            default=None,
            help="Treat .jar files in TARGET as mod units.",
        ),
        click.option(
            "--merge-all/--first-only",
            "merge_all",
            default=None,
            help="Consolidate every lang candidate instead of only the first.",
        ),
        click.option(
            "--recycle/--permanent",
            "recycle",
            default=None,
            help="Send deleted entries to the recycle bin instead of removing them.",
        ),
        click.option(
            "--backup/--no-backup",
            default=None,
            help="Zip each unit into TARGET/_backup/<timestamp> before changing it.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _output_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the shared JSON/summary/quiet flags to a command."""

    options = [
        click.option("--json", "json_output", is_flag=True, help="Emit JSON output."),
        click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines."),
        click.option("--quiet", is_flag=True, help="Suppress non-error output."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


_TARGET_ARGUMENT = click.argument(
    "target", required=False, type=click.Path(file_okay=False, path_type=str)
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="modlang")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Consolidate mod localization folders and discard everything else."""

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@_TARGET_ARGUMENT
@click.option(
    "--archives/--no-archives",
    "include_archives",
    default=None,
    help="Treat .jar files in TARGET as mod units.",
)
@_output_options
@click.pass_context
def scan(
    ctx: click.Context,
    target: Optional[str],
    include_archives: Optional[bool],
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Classify the mod units in TARGET and preview what a run would do.

    Args:
        ctx: Click context used for parameter source inspection.
        target: Directory holding mod units; defaults to the remembered one.
        include_archives: Override for archive inclusion.
        json_output: Emit JSON instead of tables.
        summary_mode: Limit output to summary lines.
        quiet: Suppress non-error output.
    """

    try:
        manager, config = _load_config(ctx, _policy_overrides(include_archives=include_archives))
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        target_root = _resolve_target(target, config)
    except (ConfigError, click.ClickException) as exc:
        _handle_cli_error(str(exc), code="invalid_input", json_output=json_output, original=exc)
        return

    options = config.organizer.to_options()
    results, cancelled = _scan_target(
        target_root, options.include_archives, announce=not json_output
    )
    manager.remember_target(target_root)
    plans = preview_plans(results, options)
    pairs = list(zip(results, plans))

    archives = sum(1 for result in results if result.is_archive)
    without_lang = sum(1 for result in results if result.lang_count == 0)

    if json_output:
        console.print_json(
            data={
                "context": {
                    "target_dir": target_root.as_posix(),
                    "include_archives": options.include_archives,
                    "cancelled": cancelled,
                },
                "units": [_plan_payload(result, plan) for result, plan in pairs],
            }
        )
        return

    _emit_message(
        _scan_table(target_root, pairs), mode="detail", quiet=quiet_enabled, summary_only=summary_only
    )
    if without_lang:
        _emit_message(
            f"[yellow]{without_lang} unit(s) have no lang folder; their folders would be "
            "emptied.[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    if cancelled:
        _emit_message(
            "[yellow]Scan cancelled; results are partial.[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    _emit_message(
        _format_summary_line(
            "Scan",
            target_root,
            {"units": len(results), "archives": archives, "without_lang": without_lang},
        ),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command()
@_TARGET_ARGUMENT
@_policy_options
@_output_options
@click.pass_context
def plan(
    ctx: click.Context,
    target: Optional[str],
    dry_run: Optional[bool],
    include_archives: Optional[bool],
    merge_all: Optional[bool],
    recycle: Optional[bool],
    backup: Optional[bool],
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """List every operation a run over TARGET would perform, without running it."""

    overrides = _policy_overrides(
        dry_run=dry_run,
        include_archives=include_archives,
        merge_all=merge_all,
        recycle=recycle,
        backup=backup,
    )
    try:
        manager, config = _load_config(ctx, overrides)
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        target_root = _resolve_target(target, config)
    except (ConfigError, click.ClickException) as exc:
        _handle_cli_error(str(exc), code="invalid_input", json_output=json_output, original=exc)
        return

    options = config.organizer.to_options()
    results, cancelled = _scan_target(
        target_root, options.include_archives, announce=not json_output
    )
    manager.remember_target(target_root)
    plans = preview_plans(results, options)

    if json_output:
        console.print_json(
            data={
                "context": {
                    "target_dir": target_root.as_posix(),
                    "options": options.model_dump(mode="json"),
                    "cancelled": cancelled,
                },
                "plans": [plan.model_dump(mode="json") for plan in plans],
            }
        )
        return

    for item in plans:
        _emit_message(
            f"[bold]{escape(item.unit_name)}[/bold] [cyan]{escape(item.policy_label)}[/cyan]",
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        for line in item.describe():
            _emit_message(
                f"  {escape(line)}", mode="detail", quiet=quiet_enabled, summary_only=summary_only
            )

    _emit_message(
        _format_summary_line(
            "Plan",
            target_root,
            {
                "units": len(plans),
                "operations": sum(len(item.operations) for item in plans),
                "moves": sum(item.planned_moves for item in plans),
                "deletes": sum(item.planned_deletes for item in plans),
            },
        ),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command()
@_TARGET_ARGUMENT
@_policy_options
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=str),
    help="Export the run log to this text file.",
)
@_output_options
@click.pass_context
def run(
    ctx: click.Context,
    target: Optional[str],
    dry_run: Optional[bool],
    include_archives: Optional[bool],
    merge_all: Optional[bool],
    recycle: Optional[bool],
    backup: Optional[bool],
    yes: bool,
    log_file: Optional[str],
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Scan TARGET, then consolidate lang folders and purge everything else.

    Args:
        ctx: Click context used for parameter source inspection.
        target: Directory holding mod units; defaults to the remembered one.
        dry_run: Override for dry-run mode.
        include_archives: Override for archive inclusion.
        merge_all: Override for the multi-candidate selection mode.
        recycle: Override for the delete mode.
        backup: Override for backups before execution.
        yes: Skip the confirmation prompt.
        log_file: Optional path receiving the exported run log.
        json_output: Emit JSON instead of tables.
        summary_mode: Limit output to summary lines.
        quiet: Suppress non-error output.

    Raises:
        SystemExit: With status 1 when any unit failed.
    """

    overrides = _policy_overrides(
        dry_run=dry_run,
        include_archives=include_archives,
        merge_all=merge_all,
        recycle=recycle,
        backup=backup,
    )
    try:
        manager, config = _load_config(ctx, overrides)
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        target_root = _resolve_target(target, config)
        options = config.organizer.to_options()
        if json_output and not yes and not options.dry_run:
            raise click.ClickException("--json requires --yes unless --dry-run is active.")
    except (ConfigError, click.ClickException) as exc:
        _handle_cli_error(str(exc), code="invalid_input", json_output=json_output, original=exc)
        return

    show_log = not (json_output or quiet_enabled or summary_only)

    def _print_entry(entry: LogEntry) -> None:
        if not show_log:
            return
        style = _LEVEL_STYLES[entry.level]
        line = escape(entry.message)
        console.print(f"[{style}]{line}[/{style}]" if style else line)

    log = RunLog(listener=_print_entry)
    log.info(f"Scan start: {target_root}")
    results, scan_cancelled = _scan_target(
        target_root, options.include_archives, announce=not json_output
    )
    manager.remember_target(target_root)
    log.info(f"Scan done: {len(results)} mods")

    if scan_cancelled:
        _handle_cli_error(
            "Scan cancelled; nothing was executed.",
            code="cancelled",
            json_output=json_output,
        )
        return

    if not results:
        _emit_message(
            "[yellow]No mod units found.[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        return

    if not yes and not options.dry_run and not json_output:
        archives = sum(1 for result in results if result.is_archive)
        without_lang = sum(1 for result in results if result.lang_count == 0)
        prompt = (
            f"Target: {target_root}\n"
            f"Mods: {len(results)} (archives: {archives}, left unmodified)\n"
            f"Without lang: {without_lang} (their folders will be emptied)\n"
            f"Multiple lang folders: {options.multi_lang_mode}\n"
            f"Delete mode: {options.delete_mode}\n"
            f"Backup zip: {'on' if options.backup_before_execute else 'off'}\n"
            "Proceed?"
        )
        if not click.confirm(prompt, default=False):
            log.info("Execution cancelled by user.")
            _emit_message(
                "[yellow]Execution cancelled; nothing was changed.[/yellow]",
                mode="summary",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            return

    cancel_event = threading.Event()
    summary = _run_worker(
        lambda: run_units(results, options, target_root, log, cancel_event=cancel_event),
        cancel_event,
        announce=not json_output,
    )

    if log_file:
        saved = log.save(Path(log_file))
        log.info(f"Log saved: {saved}")

    counts = summary.counts()
    if json_output:
        payload = summary.model_dump(mode="json")
        payload["counts"] = counts
        payload["log"] = [entry.model_dump(mode="json") for entry in log.entries]
        console.print_json(data=payload)
    else:
        _emit_message(
            _summary_table(summary), mode="detail", quiet=quiet_enabled, summary_only=summary_only
        )
        metrics: dict[str, Any] = {
            key: counts[key] for key in ("success", "warning", "failed", "cancelled")
        }
        if summary.dry_run:
            metrics["dry_run"] = True
        _emit_message(
            _format_summary_line("Run", target_root, metrics),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )

    if summary.failed:
        raise SystemExit(1)


@cli.group()
def config() -> None:
    """Manage modlang configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as `organizer.delete_mode`.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        file_data = manager.load_file_overrides()
        original_data = manager.load_file_overrides()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'organizer.dry_run'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    node = file_data
    for segment in segments[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise click.ClickException(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[segments[-1]] = parsed_value

    try:
        resolve_with_precedence(defaults=ModlangConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if file_data == original_data:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = difflib.unified_diff(
        before,
        after,
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=ModlangConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
