from __future__ import annotations

import json
from pathlib import Path

import pytest

CATALOG_RECORDS = [
    {"type": "User", "uuid": "user-admin", "username": "admin"},
    {"type": "ConceptDatatype", "uuid": "dt-coded", "name": "Coded", "hl7_abbreviation": "CWE", "creator": "user-admin"},
    {"type": "ConceptDatatype", "uuid": "dt-numeric", "name": "Numeric", "hl7_abbreviation": "NM"},
    {"type": "ConceptDatatype", "uuid": "dt-na", "name": "N/A"},
    {"type": "ConceptClass", "uuid": "cc-question", "name": "Question"},
    {"type": "ConceptClass", "uuid": "cc-misc", "name": "Misc"},
    {"type": "ConceptSource", "uuid": "src-ciel", "name": "CIEL", "hl7_code": "CIEL"},
    {
        "type": "Concept",
        "uuid": "c-yes",
        "name": "Yes",
        "concept_id": 1065,
        "datatype": "dt-na",
        "concept_class": "cc-misc",
    },
    {
        "type": "Concept",
        "uuid": "c-no",
        "name": "No",
        "concept_id": 1066,
        "datatype": "dt-na",
        "concept_class": "cc-misc",
    },
    {
        "type": "Concept",
        "uuid": "c-pregnant",
        "name": "Currently pregnant",
        "concept_id": 5272,
        "datatype": "dt-coded",
        "concept_class": "cc-question",
        "answers": ["c-yes", "c-no"],
        "mappings": [{"source": "src-ciel", "code": "5272"}],
        "creator": "user-admin",
    },
    {
        "type": "Concept",
        "uuid": "c-weight",
        "name": "Weight (kg)",
        "concept_id": 5089,
        "datatype": "dt-numeric",
        "concept_class": "cc-question",
    },
    {"type": "Concept", "uuid": "c-broken", "name": "Broken concept", "concept_class": "cc-misc"},
    {"type": "Location", "uuid": "loc-country", "name": "Kenya"},
    {"type": "Location", "uuid": "loc-clinic", "name": "Clinic", "parent_location": "loc-country"},
    {"type": "Privilege", "uuid": "priv-view", "name": "View Patients"},
    {"type": "Role", "uuid": "role-clerk", "name": "Clerk", "privileges": ["priv-view"], "inherited_roles": ["role-nurse"]},
    {"type": "Role", "uuid": "role-nurse", "name": "Nurse", "inherited_roles": ["role-clerk"]},
    {"type": "EncounterType", "uuid": "et-visit", "name": "Visit"},
    {"type": "Form", "uuid": "form-vitals", "name": "Vitals", "version": "1.0", "encounter_type": "et-visit"},
]


@pytest.fixture
def catalog_records() -> list[dict]:
    return json.loads(json.dumps(CATALOG_RECORDS))


@pytest.fixture
def catalog_file(tmp_path: Path, catalog_records: list[dict]) -> Path:
    """Catalog JSON file with one record of every kind."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"records": catalog_records}), encoding="utf-8")
    return path


@pytest.fixture
def valid_catalog_file(tmp_path: Path, catalog_records: list[dict]) -> Path:
    """Catalog JSON file without the invalid concept."""
    path = tmp_path / "valid-catalog.json"
    records = [r for r in catalog_records if r["uuid"] != "c-broken"]
    path.write_text(json.dumps({"records": records}), encoding="utf-8")
    return path
