"""Rich-based progress reporter adapter for package export."""

from __future__ import annotations

import logging
import sys
import time

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from ...application.ports.progress_reporter import ProgressContext, ProgressReporterPort

logger = logging.getLogger(__name__)


class RichProgressContext:
    """Chunk-level progress shown as a Rich progress bar."""

    def __init__(
        self,
        progress: Progress,
        task_id: TaskID,
        total_chunks: int,
    ) -> None:
        self.progress = progress
        self.task_id = task_id
        self.total_chunks = total_chunks
        self.completed = 0

    def update(self, completed: int) -> None:
        """
        Update progress with number of serialized chunks.

        Args:
            completed: Number of chunks serialized so far
        """
        self.completed = completed
        self.progress.update(self.task_id, completed=completed)

    def finish(self) -> None:
        """Mark export as complete."""
        self.progress.update(self.task_id, completed=self.total_chunks)
        self.progress.stop_task(self.task_id)


class LoggingProgressContext:
    """Fallback progress context for non-interactive mode using logging."""

    def __init__(
        self,
        total_chunks: int,
        description: str,
    ) -> None:
        self.total_chunks = total_chunks
        self.description = description
        self.completed = 0
        self.start_time = time.time()
        logger.info(f"Starting: {description} ({total_chunks} chunks)")

    def update(self, completed: int) -> None:
        self.completed = completed
        elapsed = time.time() - self.start_time
        percentage = (completed / self.total_chunks * 100) if self.total_chunks > 0 else 0

        if completed > 0:
            remaining = elapsed / completed * (self.total_chunks - completed)
            logger.info(
                f"Progress: {completed}/{self.total_chunks} chunks "
                f"({percentage:.1f}%) - Elapsed: {elapsed:.1f}s, "
                f"Estimated remaining: {remaining:.1f}s"
            )
        else:
            logger.info(
                f"Progress: {completed}/{self.total_chunks} chunks "
                f"({percentage:.1f}%) - Elapsed: {elapsed:.1f}s"
            )

    def finish(self) -> None:
        elapsed = time.time() - self.start_time
        logger.info(f"Completed: {self.description} - {self.total_chunks} chunks in {elapsed:.1f}s")


class RichProgressReporterAdapter(ProgressReporterPort):
    """Rich-based progress reporter adapter."""

    def __init__(self, console: Console | None = None) -> None:
        """
        Initialize Rich progress reporter.

        Args:
            console: Console to render to (detects TTY when omitted)
        """
        self.is_interactive = sys.stdout.isatty() if console is None else console.is_terminal
        self.console = console or Console(file=sys.stdout if self.is_interactive else sys.stderr)
        self.progress: Progress | None = None

        if not self.is_interactive:
            logger.debug("Non-interactive mode detected - using structured logging for progress")

    def start_export(
        self,
        total_chunks: int,
        description: str = "Exporting package",
    ) -> ProgressContext:
        """
        Start progress reporting for one export run.

        Args:
            total_chunks: Number of chunks the run will serialize
            description: Description for progress bar

        Returns:
            ProgressContext for updating progress
        """
        if not self.is_interactive:
            return LoggingProgressContext(total_chunks=total_chunks, description=description)

        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                TimeElapsedColumn(),
                TimeRemainingColumn(),
                console=self.console,
                expand=True,
            )
            self.progress.start()

        task_id = self.progress.add_task(description, total=max(total_chunks, 1))
        return RichProgressContext(progress=self.progress, task_id=task_id, total_chunks=max(total_chunks, 1))

    def display_summary(
        self,
        group_uuid: str,
        items_exported: int,
        related_items: int,
        chunks_written: int,
        duration_seconds: float,
        errors: list[str],
    ) -> None:
        """
        Display final summary after an export.

        Args:
            group_uuid: Package group identifier
            items_exported: Explicit items in the package
            related_items: Items discovered through references
            chunks_written: Chunk bodies serialized
            duration_seconds: Total duration in seconds
            errors: Failure messages from the export log
        """
        summary_table = Table(title="Package Export Summary", show_header=True, header_style="bold")
        summary_table.add_column("Metric", style="cyan")
        summary_table.add_column("Value", style="green")

        summary_table.add_row("Package Group", group_uuid)
        summary_table.add_row("Items Exported", str(items_exported))
        summary_table.add_row("Related Items", str(related_items))
        summary_table.add_row("Chunks Written", str(chunks_written))
        summary_table.add_row("Duration", f"{duration_seconds:.2f}s")
        if errors:
            summary_table.add_row("Errors", str(len(errors)))

        self.console.print(summary_table)

        if errors:
            error_text = "\n".join(f"❌ {e}" for e in errors[:10])
            if len(errors) > 10:
                error_text += f"\n... and {len(errors) - 10} more errors"
            self.console.print(Panel(error_text, title="Errors", border_style="red"))

    def cleanup(self) -> None:
        """Stop the live progress display (call when done)."""
        if self.progress is not None:
            self.progress.stop()
            self.progress = None
