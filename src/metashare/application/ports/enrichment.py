from typing import Protocol, runtime_checkable

from ...domain.models.metadata import Concept


@runtime_checkable
class EnrichmentServicePort(Protocol):
    """Protocol for attaching local cross-references to concepts before export."""
    
    def add_local_mapping(self, concept: Concept) -> None:
        """
        Add a mapping from the local concept source to the concept.
        
        Must be idempotent: calling twice for the same concept leaves a single mapping.
        """
        ...
