"""Unit tests for the local-mapping enrichment hook."""

from __future__ import annotations

import pytest

from metashare.application.services.enrichment_hook import EnrichmentHook
from metashare.domain.models.metadata import Concept, ConceptSource, EncounterType, Location
from metashare.infrastructure.adapters.local_mapping_enricher import LocalMappingEnricher


class MockEnrichmentService:
    """Records every concept passed for enrichment."""

    def __init__(self) -> None:
        self.calls: list[Concept] = []

    def add_local_mapping(self, concept: Concept) -> None:
        self.calls.append(concept)


class MockExportLog:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def log(self, message: str, cause: BaseException | None = None) -> None:
        self.messages.append(message)


def _records() -> list:
    return [
        Concept(uuid="c-1", name="Weight"),
        Location(uuid="loc-1", name="Clinic"),
        Concept(uuid="c-2", name="Height"),
        EncounterType(uuid="et-1", name="Visit"),
    ]


def test_enrichment_disabled_makes_no_service_calls():
    service = MockEnrichmentService()
    hook = EnrichmentHook(enabled=False, service=service)

    enriched = hook.enrich(_records())

    assert enriched == 0
    assert service.calls == []


def test_enrichment_enabled_calls_service_once_per_concept():
    service = MockEnrichmentService()
    log = MockExportLog()
    hook = EnrichmentHook(enabled=True, service=service, export_log=log)

    enriched = hook.enrich(_records())

    assert enriched == 2
    assert [c.uuid for c in service.calls] == ["c-1", "c-2"]
    assert "Adding mappings to Concepts" in log.messages


def test_enrichment_enabled_requires_service():
    with pytest.raises(ValueError, match="enrichment service is required"):
        EnrichmentHook(enabled=True)


def test_enrichment_service_errors_propagate():
    class FailingService:
        def add_local_mapping(self, concept: Concept) -> None:
            raise RuntimeError("source not writable")

    hook = EnrichmentHook(enabled=True, service=FailingService())

    with pytest.raises(RuntimeError, match="source not writable"):
        hook.enrich(_records())


def test_local_mapping_enricher_is_idempotent():
    source = ConceptSource(uuid="src-local", name="Local")
    enricher = LocalMappingEnricher(source)
    concept = Concept(uuid="c-1", name="Weight", concept_id=5089)

    enricher.add_local_mapping(concept)
    enricher.add_local_mapping(concept)

    assert len(concept.mappings) == 1
    assert concept.mappings[0].source is source
    assert concept.mappings[0].code == "5089"


def test_local_mapping_enricher_uses_uuid_without_concept_id():
    enricher = LocalMappingEnricher(ConceptSource(uuid="src-local", name="Local"))
    concept = Concept(uuid="c-1", name="Weight")

    enricher.add_local_mapping(concept)

    assert concept.mappings[0].code == "c-1"
