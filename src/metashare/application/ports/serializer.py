from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetadataSerializerPort(Protocol):
    """Protocol for serializing descriptors and metadata records to text."""
    
    def serialize(self, value: Any) -> str:
        """
        Serialize a descriptor, a single record, or a sequence of records.
        
        Output must be deterministic for equal input and must not include the
        XML declaration; the export pipeline adds the prologue.
        
        Raises:
            TypeError: If the value cannot be serialized
        """
        ...
