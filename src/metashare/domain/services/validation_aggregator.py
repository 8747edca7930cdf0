"""Domain service collecting per-item validation failures for one export run."""

from __future__ import annotations

from ..models.validation import ValidationFailure


class ValidationAggregator:
    """
    Run-scoped accumulator of validation failures.

    Recording never raises; the export pipeline decides when accumulated
    failures become fatal by checking ``has_failures()`` at chunk boundaries.
    """

    def __init__(self) -> None:
        self._failures: list[ValidationFailure] = []

    def record(self, failure: ValidationFailure) -> None:
        self._failures.append(failure)

    def has_failures(self) -> bool:
        return bool(self._failures)

    @property
    def failures(self) -> tuple[ValidationFailure, ...]:
        return tuple(self._failures)

    def clear(self) -> None:
        """Forget failures from a previous run."""
        self._failures.clear()

    def __len__(self) -> int:
        return len(self._failures)
