import json
from pathlib import Path

import pytest

from metashare.domain.errors import CatalogError, MetadataNotFound, UnknownMetadataType
from metashare.domain.models.item import Item
from metashare.domain.models.metadata import Concept, Location, Role, User
from metashare.infrastructure.adapters.json_catalog_repository import JsonCatalogRepository


def test_from_file_loads_all_records(catalog_file: Path, catalog_records: list[dict]):
    repository = JsonCatalogRepository.from_file(catalog_file)

    assert len(repository) == len(catalog_records)
    assert repository.items()[0] == Item("User", "user-admin")


def test_get_by_uuid_links_references(catalog_file: Path):
    repository = JsonCatalogRepository.from_file(catalog_file)

    concept = repository.get_by_uuid("Concept", "c-pregnant")

    assert isinstance(concept, Concept)
    assert concept.concept_id == 5272
    assert concept.datatype.name == "Coded"
    assert [a.uuid for a in concept.answers] == ["c-yes", "c-no"]
    assert concept.mappings[0].source.uuid == "src-ciel"
    assert concept.mappings[0].code == "5272"
    assert isinstance(concept.creator, User)


def test_session_shares_instances_until_cleared(catalog_file: Path):
    repository = JsonCatalogRepository.from_file(catalog_file)

    clinic = repository.get_by_uuid("Location", "loc-clinic")
    country = repository.get_by_uuid("Location", "loc-country")
    assert clinic.parent_location is country

    repository.clear_session()

    assert repository.get_by_uuid("Location", "loc-country") is not country


def test_cyclic_references_resolve_to_same_instance(catalog_file: Path):
    repository = JsonCatalogRepository.from_file(catalog_file)

    clerk = repository.get_by_uuid("Role", "role-clerk")

    nurse = clerk.inherited_roles[0]
    assert isinstance(nurse, Role)
    assert nurse.inherited_roles[0] is clerk


def test_get_by_uuid_with_wrong_type_is_not_found(catalog_file: Path):
    repository = JsonCatalogRepository.from_file(catalog_file)

    with pytest.raises(MetadataNotFound, match=r"Location \[c-yes\] not found"):
        repository.get_by_uuid("Location", "c-yes")
    with pytest.raises(MetadataNotFound):
        repository.get_by_uuid("Concept", "nope")


def test_get_by_uuid_unknown_type(catalog_file: Path):
    repository = JsonCatalogRepository.from_file(catalog_file)
    with pytest.raises(UnknownMetadataType):
        repository.get_by_uuid("Patient", "p-1")


def test_missing_file(tmp_path: Path):
    with pytest.raises(CatalogError, match="file not found"):
        JsonCatalogRepository.from_file(tmp_path / "missing.json")


def test_invalid_json(tmp_path: Path):
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="invalid JSON"):
        JsonCatalogRepository.from_file(path)


def test_records_list_required(tmp_path: Path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"type": "Location", "uuid": "x"}]), encoding="utf-8")
    with pytest.raises(CatalogError, match="'records' list"):
        JsonCatalogRepository.from_file(path)


@pytest.mark.parametrize(
    "records,message",
    [
        ([{"type": "Patient", "uuid": "p-1"}], "Unknown metadata type"),
        ([{"type": "Location", "uuid": "x"}, {"type": "Concept", "uuid": "x"}], "duplicate uuid"),
        ([{"type": "Location", "uuid": "x", "colour": "red"}], "unknown fields: colour"),
        ([{"type": "Location", "uuid": "x", "parent_location": "missing"}], "references unknown uuid 'missing'"),
        ([{"uuid": "x"}], "needs 'type' and 'uuid'"),
    ],
)
def test_inconsistent_catalogs_are_rejected(records: list[dict], message: str):
    with pytest.raises(CatalogError, match=message):
        JsonCatalogRepository(records)


def test_scalar_only_records():
    repository = JsonCatalogRepository([{"type": "Location", "uuid": "loc-1", "name": "Clinic", "retired": True}])

    location = repository.get_by_uuid("Location", "loc-1")

    assert isinstance(location, Location)
    assert location.retired is True
    assert location.parent_location is None
