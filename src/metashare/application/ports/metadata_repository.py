from typing import Protocol, runtime_checkable

from ...domain.models.metadata import MetadataObject


@runtime_checkable
class MetadataRepositoryPort(Protocol):
    """Protocol for loading metadata records from storage by type and uuid."""
    
    def get_by_uuid(self, item_type: str, uuid: str) -> MetadataObject:
        """
        Load a metadata record.
        
        Args:
            item_type: Registered metadata type name (e.g., 'Concept')
            uuid: Record uuid
        
        Returns:
            Resolved MetadataObject with its references linked
        
        Raises:
            MetadataNotFound: If no record of that type has the uuid
            UnknownMetadataType: If item_type is not a registered kind
        """
        ...
    
    def clear_session(self) -> None:
        """
        Release records loaded since the last call.
        
        Called by the export pipeline after each chunk so that only one
        chunk's worth of resolved records is held in memory.
        """
        ...
