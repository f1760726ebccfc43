"""Configuration models describing modlang settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MultiLangMode = Literal["first_only", "merge_all"]
DeleteMode = Literal["permanent", "recycle"]


class ModlangBaseModel(BaseModel):
    """Shared configuration for modlang Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class OrganizerOptions(ModlangBaseModel):
    """Policy applied when planning and executing a run.

    Attributes:
        dry_run: Log every operation without touching the filesystem.
        include_archives: Treat `.jar` files under the target as mod units.
        multi_lang_mode: Which lang candidates to consolidate when several exist.
        delete_mode: Whether deletions are permanent or go to the recycle bin.
        backup_before_execute: Zip each unit into a timestamped backup folder first.
    """

    dry_run: bool = False
    include_archives: bool = False
    multi_lang_mode: MultiLangMode = "first_only"
    delete_mode: DeleteMode = "permanent"
    backup_before_execute: bool = False


class OrganizerSettings(OrganizerOptions):
    """Persisted organizer section: the policy plus the last target directory.

    Attributes:
        target_dir: Directory used when a command is invoked without a target.
    """

    target_dir: Optional[str] = None

    def to_options(self) -> OrganizerOptions:
        """Return the policy portion of the settings."""
        return OrganizerOptions.model_validate(self.model_dump(exclude={"target_dir"}))


class LoggingSettings(ModlangBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional path of a rotating log file.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3


class CLIOptions(ModlangBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class ModlangConfig(ModlangBaseModel):
    """Top-level configuration struct for modlang.

    Attributes:
        organizer: Run policy and remembered target directory.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    organizer: OrganizerSettings = Field(default_factory=OrganizerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "ModlangBaseModel",
    "MultiLangMode",
    "DeleteMode",
    "OrganizerOptions",
    "OrganizerSettings",
    "LoggingSettings",
    "CLIOptions",
    "ModlangConfig",
]
