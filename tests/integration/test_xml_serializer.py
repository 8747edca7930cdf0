import xml.etree.ElementTree as ET

import pytest

from metashare.domain.models.item import Item
from metashare.domain.models.metadata import (
    Concept,
    ConceptClass,
    ConceptDatatype,
    ConceptMapping,
    ConceptSource,
    Location,
    Role,
    User,
)
from metashare.domain.models.package import ExportedPackage
from metashare.infrastructure.adapters.xml_serializer import XmlMetadataSerializer


@pytest.fixture
def serializer() -> XmlMetadataSerializer:
    return XmlMetadataSerializer()


def test_record_scalars_and_references(serializer):
    concept = Concept(
        uuid="c-1",
        name="Currently pregnant",
        concept_id=5272,
        datatype=ConceptDatatype(uuid="dt-coded", name="Coded"),
        concept_class=ConceptClass(uuid="cc-q", name="Question"),
        answers=[Concept(uuid="c-yes", name="Yes")],
        mappings=[ConceptMapping(ConceptSource(uuid="src-ciel", name="CIEL"), "5272")],
        creator=User(uuid="user-admin", username="admin"),
    )

    element = ET.fromstring(serializer.serialize(concept))

    assert element.tag == "Concept"
    assert element.get("uuid") == "c-1"
    assert element.findtext("name") == "Currently pregnant"
    assert element.findtext("conceptId") == "5272"
    assert element.findtext("isSet") == "false"
    assert element.find("datatype").attrib == {"type": "ConceptDatatype", "uuid": "dt-coded"}
    assert element.find("conceptClass").get("uuid") == "cc-q"
    assert element.find("creator").attrib == {"type": "User", "uuid": "user-admin"}
    assert [r.get("uuid") for r in element.find("answers")] == ["c-yes"]
    mapping = element.find("mappings/mapping")
    assert mapping.get("code") == "5272"
    assert mapping.find("source").get("uuid") == "src-ciel"
    # Referenced records are not inlined
    assert element.find("datatype/name") is None


def test_none_fields_are_omitted(serializer):
    element = ET.fromstring(serializer.serialize(Location(uuid="loc-1", name="Clinic")))
    assert element.find("description") is None
    assert element.find("parentLocation") is None
    assert element.find("address") is None


def test_cyclic_records_serialize(serializer):
    clerk = Role(uuid="role-clerk", name="Clerk")
    nurse = Role(uuid="role-nurse", name="Nurse", inherited_roles=[clerk])
    clerk.inherited_roles.append(nurse)

    element = ET.fromstring(serializer.serialize([clerk, nurse]))

    assert element.tag == "list"
    assert [child.get("uuid") for child in element] == ["role-clerk", "role-nurse"]


def test_empty_list(serializer):
    assert serializer.serialize([]) == "<list />"


def test_package_header(serializer):
    package = ExportedPackage(name="Concepts", description="All", owner="admin", group_uuid="g-1", version=3)
    package.add_item(Item("Concept", "c-1"))
    package.related_items.update({Item("ConceptDatatype", "dt-1"), Item("ConceptClass", "cc-1")})

    element = ET.fromstring(serializer.serialize(package))

    assert element.tag == "package"
    assert element.get("version") == "3"
    assert element.get("uuid") == package.uuid
    assert element.findtext("groupUuid") == "g-1"
    assert element.findtext("owner") == "admin"
    assert [i.get("uuid") for i in element.find("items")] == ["c-1"]
    assert [i.get("type") for i in element.find("relatedItems")] == ["ConceptClass", "ConceptDatatype"]


def test_output_is_stable(serializer):
    package = ExportedPackage(name="Concepts", description="All", group_uuid="g-1")
    package.related_items.update({Item("Location", "b"), Item("Location", "a"), Item("Concept", "z")})
    assert serializer.serialize(package) == serializer.serialize(package)


def test_no_xml_declaration(serializer):
    assert not serializer.serialize(Location(uuid="loc-1", name="Clinic")).startswith("<?xml")


def test_unsupported_value(serializer):
    with pytest.raises(TypeError, match="Cannot serialize object of type dict"):
        serializer.serialize({"uuid": "x"})
    with pytest.raises(TypeError, match="list element of type str"):
        serializer.serialize(["x"])
