from typing import Any, Protocol, runtime_checkable

from ...domain.models.validation import ValidationResult


@runtime_checkable
class ValidatorPort(Protocol):
    """Protocol for validating package descriptors and metadata records."""
    
    def validate(self, target: Any) -> ValidationResult:
        """
        Validate an ExportedPackage descriptor or a MetadataObject.
        
        Args:
            target: Descriptor or metadata record
        
        Returns:
            ValidationResult; ``reason`` is the first error when invalid
        
        Note:
            Implementations should report problems through the result. The
            export pipeline also tolerates exceptions raised for individual
            records and records them as validation failures.
        """
        ...
