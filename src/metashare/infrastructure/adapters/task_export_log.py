"""Export log adapter keeping task log entries and mirroring them to logging."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger("metashare.export")


@dataclass(frozen=True)
class LogEntry:
    """
    One export task log entry.

    Fields:
        message: Log message
        cause: Exception attached to a failure entry (optional)
        timestamp: When the entry was appended
    """

    message: str
    cause: BaseException | None = None
    timestamp: datetime = field(default_factory=datetime.now)


class TaskExportLog:
    """Append-only export log; entries are kept for display after the run."""

    def __init__(self, echo: bool = True) -> None:
        """
        Args:
            echo: Mirror entries to the ``metashare.export`` logger
        """
        self.echo = echo
        self._entries: list[LogEntry] = []

    def log(self, message: str, cause: BaseException | None = None) -> None:
        self._entries.append(LogEntry(message=message, cause=cause))
        if not self.echo:
            return
        if cause is not None:
            logger.warning(message, exc_info=(type(cause), cause, cause.__traceback__))
        elif "failed" in message:
            logger.warning(message)
        else:
            logger.info(message)

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self._entries]

    @property
    def errors(self) -> list[LogEntry]:
        """Entries recorded with an exception."""
        return [entry for entry in self._entries if entry.cause is not None]
