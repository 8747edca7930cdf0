from __future__ import annotations

from dataclasses import dataclass

from .item import Item


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a descriptor or metadata record.

    Fields:
        errors: Validation error messages, in rule order (empty when valid)
    """

    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def reason(self) -> str | None:
        """First validation error, or None when valid."""
        return self.errors[0] if self.errors else None

    @classmethod
    def valid(cls) -> ValidationResult:
        return cls()

    @classmethod
    def invalid(cls, *errors: str) -> ValidationResult:
        if not errors:
            raise ValueError("invalid() requires at least one error")
        return cls(errors=tuple(errors))


@dataclass(frozen=True)
class ValidationFailure:
    """
    A single record that failed validation during an export run.

    Fields:
        subject: Item reference of the failing record
        reason: Human-readable failure reason
        cause: Exception raised by the validator, if any
    """

    subject: Item
    reason: str
    cause: BaseException | None = None
