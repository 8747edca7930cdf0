"""Rule-based validator for package descriptors and metadata records."""

from __future__ import annotations

import logging
from typing import Any

from ...domain.models.metadata import Concept, Form, MetadataObject, User
from ...domain.models.package import ExportedPackage
from ...domain.models.validation import ValidationResult

logger = logging.getLogger(__name__)

MAX_UUID_LENGTH = 38
MAX_PACKAGE_NAME_LENGTH = 64
CODED_DATATYPE_NAME = "Coded"


class RuleBasedValidator:
    """
    Validates descriptors and records against fixed rules.

    Rules run in a fixed order so the first reported error is stable.
    """

    def validate(self, target: Any) -> ValidationResult:
        """
        Validate an ExportedPackage or a MetadataObject.

        Raises:
            TypeError: If target is neither
        """
        if isinstance(target, ExportedPackage):
            errors = self._package_errors(target)
        elif isinstance(target, MetadataObject):
            errors = self._metadata_errors(target)
        else:
            raise TypeError(f"Cannot validate object of type {type(target).__name__}")

        if errors:
            logger.debug(f"Validation of {type(target).__name__} failed: {errors}")
            return ValidationResult.invalid(*errors)
        return ValidationResult.valid()

    def _package_errors(self, package: ExportedPackage) -> list[str]:
        errors: list[str] = []
        if not package.name or not package.name.strip():
            errors.append("name: Package name is required")
        elif len(package.name) > MAX_PACKAGE_NAME_LENGTH:
            errors.append(f"name: Package name must be at most {MAX_PACKAGE_NAME_LENGTH} characters")
        if not package.description or not package.description.strip():
            errors.append("description: Package description is required")
        if not package.group_uuid:
            errors.append("groupUuid: Package group uuid is required")
        if package.version < 1:
            errors.append(f"version: Package version must be >= 1, got {package.version}")

        seen = set()
        for item in package.items:
            if item in seen:
                errors.append(f"items: Duplicate item {item}")
                break
            seen.add(item)
        return errors

    def _metadata_errors(self, obj: MetadataObject) -> list[str]:
        errors: list[str] = []
        if not obj.uuid or not obj.uuid.strip():
            errors.append("uuid: uuid is required")
        elif len(obj.uuid) > MAX_UUID_LENGTH:
            errors.append(f"uuid: uuid must be at most {MAX_UUID_LENGTH} characters")

        if not isinstance(obj, User) and (not obj.name or not obj.name.strip()):
            errors.append("name: name is required")
        if obj.retired and not obj.retire_reason:
            errors.append("retireReason: retire reason is required for retired records")

        if isinstance(obj, Concept):
            errors.extend(self._concept_errors(obj))
        elif isinstance(obj, Form) and not obj.version:
            errors.append("version: Form version is required")
        return errors

    def _concept_errors(self, concept: Concept) -> list[str]:
        errors: list[str] = []
        if concept.datatype is None:
            errors.append("datatype: Concept datatype is required")
        elif concept.answers and concept.datatype.name != CODED_DATATYPE_NAME:
            errors.append(
                f"answers: Only {CODED_DATATYPE_NAME} concepts can have answers "
                f"(datatype is {concept.datatype.name})"
            )
        if concept.concept_class is None:
            errors.append("conceptClass: Concept class is required")
        if concept.set_members and not concept.is_set:
            errors.append("setMembers: Concept has set members but is not marked as a set")
        return errors
