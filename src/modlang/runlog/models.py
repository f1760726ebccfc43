"""Run log data models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["info", "warn", "error"]


class LogEntry(BaseModel):
    """A single line emitted while scanning or executing."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now().astimezone())
    level: LogLevel = "info"
    message: str

    def format_line(self) -> str:
        """Render the entry as a tab separated export line."""
        return f"{self.timestamp:%Y-%m-%d %H:%M:%S}\t{self.level.upper()}\t{self.message}"


__all__ = ["LogEntry", "LogLevel"]
