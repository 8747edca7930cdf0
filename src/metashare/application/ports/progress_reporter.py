"""Port interface for reporting progress during package export."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class ProgressContext(Protocol):
    """Context for chunk-level export progress."""

    def update(self, completed: int) -> None:
        """Update progress with number of serialized chunks."""
        ...

    def finish(self) -> None:
        """Mark export as complete."""
        ...


class ProgressReporterPort(ABC):
    """Port for reporting progress while chunks are exported."""

    @abstractmethod
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
        pass
