"""Configuration-gated enrichment of concepts before they are serialized."""

from __future__ import annotations

import logging
from typing import Sequence

from ...domain.models.metadata import Concept, MetadataObject
from ..ports.enrichment import EnrichmentServicePort
from ..ports.export_log import ExportLogPort

logger = logging.getLogger(__name__)


class EnrichmentHook:
    """
    Adds local mappings to concepts when the administrator enabled it.

    Only concepts are enriched; other records pass through untouched. Service
    errors propagate and fail the export.
    """

    def __init__(
        self,
        enabled: bool = False,
        service: EnrichmentServicePort | None = None,
        export_log: ExportLogPort | None = None,
    ) -> None:
        if enabled and service is None:
            raise ValueError("An enrichment service is required when enrichment is enabled")
        self.enabled = enabled
        self.service = service
        self.export_log = export_log

    def enrich(self, objects: Sequence[MetadataObject]) -> int:
        """
        Enrich qualifying records in place.

        Returns:
            Number of concepts passed to the enrichment service
        """
        if not self.enabled or self.service is None:
            return 0

        if self.export_log is not None:
            self.export_log.log("Adding mappings to Concepts")

        enriched = 0
        for obj in objects:
            if isinstance(obj, Concept):
                self.service.add_local_mapping(obj)
                enriched += 1

        logger.debug(f"Added local mappings to {enriched} concepts")
        return enriched
