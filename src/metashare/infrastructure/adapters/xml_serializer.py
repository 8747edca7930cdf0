"""XML serializer adapter for package headers and metadata records."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Sequence

from ...domain.models.metadata import Concept, MetadataObject
from ...domain.models.package import ExportedPackage


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class XmlMetadataSerializer:
    """
    Serializes descriptors and records with ``xml.etree.ElementTree``.

    Each record becomes an element named after its type with a ``uuid``
    attribute and one child per non-empty scalar field. Referenced records are
    written as ``type``/``uuid`` references rather than inlined, so output is
    finite for cyclic graphs and stable for equal input. The XML declaration is
    not included.
    """

    def serialize(self, value: Any) -> str:
        """
        Serialize an ExportedPackage, a MetadataObject or a sequence of MetadataObjects.

        Raises:
            TypeError: For any other value
        """
        if isinstance(value, ExportedPackage):
            element = self._package_element(value)
        elif isinstance(value, MetadataObject):
            element = self._record_element(value)
        elif isinstance(value, (list, tuple)):
            element = self._list_element(value)
        else:
            raise TypeError(f"Cannot serialize object of type {type(value).__name__}")
        return ET.tostring(element, encoding="unicode")

    def _package_element(self, package: ExportedPackage) -> ET.Element:
        root = ET.Element("package", {"uuid": package.uuid, "version": str(package.version)})
        for tag, value in (
            ("name", package.name),
            ("description", package.description),
            ("owner", package.owner),
            ("groupUuid", package.group_uuid),
            ("dateCreated", package.date_created),
        ):
            if value is not None:
                ET.SubElement(root, tag).text = _text(value)

        items = ET.SubElement(root, "items")
        for item in package.items:
            ET.SubElement(items, "item", {"type": item.type, "uuid": item.uuid})
        related = ET.SubElement(root, "relatedItems")
        for item in package.sorted_related_items():
            ET.SubElement(related, "item", {"type": item.type, "uuid": item.uuid})
        return root

    def _list_element(self, values: Sequence[Any]) -> ET.Element:
        root = ET.Element("list")
        for value in values:
            if not isinstance(value, MetadataObject):
                raise TypeError(f"Cannot serialize list element of type {type(value).__name__}")
            root.append(self._record_element(value))
        return root

    def _record_element(self, obj: MetadataObject) -> ET.Element:
        element = ET.Element(obj.item_type, {"uuid": obj.uuid})
        for name in type(obj).scalar_fields():
            if name == "uuid":
                continue
            value = getattr(obj, name)
            if value is None:
                continue
            ET.SubElement(element, _camel(name)).text = _text(value)

        for name in type(obj).reference_fields:
            ref = getattr(obj, name)
            if ref is not None:
                ET.SubElement(element, _camel(name), {"type": ref.item_type, "uuid": ref.uuid})

        for name in type(obj).collection_fields:
            refs = getattr(obj, name)
            if not refs:
                continue
            container = ET.SubElement(element, _camel(name))
            for ref in refs:
                ET.SubElement(container, "ref", {"type": ref.item_type, "uuid": ref.uuid})

        if isinstance(obj, Concept) and obj.mappings:
            container = ET.SubElement(element, "mappings")
            for mapping in obj.mappings:
                mapping_element = ET.SubElement(container, "mapping", {"code": mapping.code})
                ET.SubElement(mapping_element, "source", {"type": mapping.source.item_type, "uuid": mapping.source.uuid})
        return element
