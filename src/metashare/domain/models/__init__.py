"""Domain models for metadata package export."""

from .item import Item
from .metadata import (
    METADATA_TYPES,
    Concept,
    ConceptClass,
    ConceptDatatype,
    ConceptMapping,
    ConceptSource,
    EncounterType,
    Form,
    Location,
    MetadataObject,
    Privilege,
    Role,
    User,
    is_exportable,
    metadata_type,
)
from .package import ExportedPackage, SerializedPackage, wrap_with_prologue
from .validation import ValidationFailure, ValidationResult

__all__ = [
    "Item",
    "METADATA_TYPES",
    "Concept",
    "ConceptClass",
    "ConceptDatatype",
    "ConceptMapping",
    "ConceptSource",
    "EncounterType",
    "Form",
    "Location",
    "MetadataObject",
    "Privilege",
    "Role",
    "User",
    "is_exportable",
    "metadata_type",
    "ExportedPackage",
    "SerializedPackage",
    "wrap_with_prologue",
    "ValidationFailure",
    "ValidationResult",
]
