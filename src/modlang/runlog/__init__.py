"""In-memory run log with text export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from .models import LogEntry, LogLevel

LOGGER = logging.getLogger(__name__)

_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class RunLog:
    """Collect log entries for one session and mirror them to ``logging``.

    ``info``, ``warn`` and ``error`` take a single message, so the bound
    methods can be handed directly to the executor as its log callbacks.
    """

    def __init__(self, listener: Optional[Callable[[LogEntry], None]] = None) -> None:
        """Initialize an empty log.

        Args:
            listener: Optional callable notified of every new entry, e.g. to
                render it live.
        """
        self._entries: list[LogEntry] = []
        self._listener = listener

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of the collected entries."""
        return list(self._entries)

    def info(self, message: str) -> None:
        self.add("info", message)

    def warn(self, message: str) -> None:
        self.add("warn", message)

    def error(self, message: str) -> None:
        self.add("error", message)

    def add(self, level: LogLevel, message: str) -> LogEntry:
        """Append an entry and forward it to the logger and listener."""
        entry = LogEntry(level=level, message=message)
        self._entries.append(entry)
        LOGGER.log(_LEVELS[level], message)
        if self._listener is not None:
            self._listener(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def export_text(self) -> str:
        """Return all entries as newline terminated export lines."""
        return "".join(entry.format_line() + "\n" for entry in self._entries)

    def save(self, path: Path) -> Path:
        """Write the export to ``path``, creating parent directories.

        Returns:
            Path: The written file.
        """
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_text(), encoding="utf-8")
        return path


__all__ = ["LogEntry", "LogLevel", "RunLog"]
