"""Enrichment adapter attaching local concept mappings."""

from __future__ import annotations

import logging

from ...domain.models.metadata import Concept, ConceptMapping, ConceptSource
from ..config.settings import LocalSourceSettings

logger = logging.getLogger(__name__)


class LocalMappingEnricher:
    """
    Maps concepts to this installation's local concept source.

    The mapping code is the concept's numeric id, or its uuid when the concept
    has no id. Concepts that already carry the mapping are left unchanged.
    """

    def __init__(self, local_source: ConceptSource) -> None:
        self.local_source = local_source

    @classmethod
    def from_settings(cls, settings: LocalSourceSettings) -> LocalMappingEnricher:
        return cls(
            ConceptSource(
                uuid=settings.uuid,
                name=settings.name,
                description=settings.description,
                hl7_code=settings.hl7_code,
            )
        )

    def add_local_mapping(self, concept: Concept) -> None:
        code = str(concept.concept_id) if concept.concept_id is not None else concept.uuid
        if concept.has_mapping(self.local_source, code):
            return
        concept.mappings.append(ConceptMapping(source=self.local_source, code=code))
        logger.debug(f"Added local mapping {self.local_source.name}:{code} to concept {concept.uuid}")
