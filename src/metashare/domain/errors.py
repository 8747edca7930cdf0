"""Domain errors for package export operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models.validation import ValidationFailure


class ExportTaskError(Exception):
    """
    Base class for failures raised by the export pipeline itself.

    The top-level export handler lets these pass through unchanged; any other
    exception is wrapped into ``ExportFailed``.
    """


class PackageValidationError(ExportTaskError):
    """
    Raised when the package descriptor fails validation, before any item is loaded.

    Attributes:
        reason: First validation error reported for the descriptor
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to validate with reason: {reason}")


class ItemsFailedValidation(ExportTaskError):
    """
    Raised at a chunk boundary when one or more items failed validation.

    Individual reasons are reported through the export log; the message stays generic.

    Attributes:
        failures: Validation failures recorded during the run
    """

    def __init__(self, failures: Sequence[ValidationFailure] = ()) -> None:
        self.failures = tuple(failures)
        super().__init__("Items failed validation")


class ExportFailed(ExportTaskError):
    """
    Raised when resolution, enrichment, serialization or persistence fails unexpectedly.

    Attributes:
        cause: Original exception (also available as ``__cause__``)
    """

    def __init__(self, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__("Export failed")


class MetadataNotFound(Exception):
    """
    Raised when storage has no record for a type and uuid.

    Attributes:
        item_type: Requested metadata type
        uuid: Requested uuid
    """

    def __init__(self, item_type: str, uuid: str) -> None:
        self.item_type = item_type
        self.uuid = uuid
        super().__init__(f"{item_type} [{uuid}] not found")


class UnknownMetadataType(Exception):
    """
    Raised when a type name is not a registered metadata kind.

    Attributes:
        type_name: Unrecognized type name
        known_types: Registered type names
    """

    def __init__(self, type_name: str, known_types: Sequence[str] = ()) -> None:
        self.type_name = type_name
        self.known_types = list(known_types)
        msg = f"Unknown metadata type '{type_name}'"
        if self.known_types:
            msg += f". Known types: {', '.join(self.known_types)}"
        super().__init__(msg)


class CatalogError(Exception):
    """
    Raised when a metadata catalog file cannot be read or is inconsistent.

    Attributes:
        path: Catalog file path
        reason: What is wrong with the catalog
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid metadata catalog {path}: {reason}")


class PackageStoreError(Exception):
    """
    Raised when a serialized package cannot be written to or read from the store.

    Attributes:
        path: Package location
        reason: Failure description
        hint: Actionable hint for resolution (optional)
    """

    def __init__(self, path: str, reason: str, hint: str | None = None) -> None:
        self.path = path
        self.reason = reason
        self.hint = hint
        msg = f"Package store failure at {path}: {reason}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)
