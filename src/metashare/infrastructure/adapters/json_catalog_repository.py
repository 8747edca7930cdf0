"""Metadata repository adapter backed by a JSON catalog file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

from ...domain.errors import CatalogError, MetadataNotFound, UnknownMetadataType
from ...domain.models.item import Item
from ...domain.models.metadata import Concept, ConceptMapping, MetadataObject, metadata_type

logger = logging.getLogger(__name__)


class JsonCatalogRepository:
    """
    Loads metadata records from a JSON catalog.

    Catalog format::

        {"records": [
            {"type": "ConceptDatatype", "uuid": "...", "name": "Coded"},
            {"type": "Concept", "uuid": "...", "name": "...", "datatype": "<uuid>",
             "answers": ["<uuid>", ...], "mappings": [{"source": "<uuid>", "code": "..."}]}
        ]}

    Reference fields hold the uuid of the referenced record; collection fields
    hold lists of uuids. Records are materialized on demand and kept in a
    session identity map (one object per uuid) until ``clear_session()``.
    """

    def __init__(self, records: Iterable[dict[str, Any]], source: str = "<memory>") -> None:
        """
        Initialize repository from raw catalog records.

        Args:
            records: Catalog record dicts (see class docstring)
            source: Catalog origin used in error messages

        Raises:
            CatalogError: If records are malformed, duplicated, or reference unknown uuids
        """
        self.source = source
        self._records: dict[str, dict[str, Any]] = {}
        self._session: dict[str, MetadataObject] = {}

        for index, record in enumerate(records):
            self._add_record(index, record)
        self._check_references()

        logger.debug(f"Loaded {len(self._records)} catalog records from {source}")

    @classmethod
    def from_file(cls, path: Path | str) -> JsonCatalogRepository:
        """
        Load a catalog from a JSON file.

        Raises:
            CatalogError: If the file is missing, not JSON, or inconsistent
        """
        path = Path(path)
        if not path.exists():
            raise CatalogError(str(path), "file not found")
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(str(path), f"invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("records"), list):
            raise CatalogError(str(path), "expected an object with a 'records' list")
        return cls(data["records"], source=str(path))

    def _add_record(self, index: int, record: Any) -> None:
        if not isinstance(record, dict):
            raise CatalogError(self.source, f"record #{index} is not an object")
        type_name = record.get("type")
        uuid = record.get("uuid")
        if not type_name or not uuid:
            raise CatalogError(self.source, f"record #{index} needs 'type' and 'uuid'")
        try:
            cls = metadata_type(type_name)
        except UnknownMetadataType as e:
            raise CatalogError(self.source, f"record #{index}: {e}") from e
        if uuid in self._records:
            raise CatalogError(self.source, f"duplicate uuid '{uuid}' (record #{index})")

        allowed = set(cls.scalar_fields()) | set(cls.reference_fields) | set(cls.collection_fields)
        allowed |= set(cls.value_collection_fields()) | {"type"}
        unexpected = sorted(set(record) - allowed)
        if unexpected:
            raise CatalogError(
                self.source,
                f"record #{index} ({type_name} {uuid}) has unknown fields: {', '.join(unexpected)}",
            )
        self._records[uuid] = record

    def _check_references(self) -> None:
        for uuid, record in self._records.items():
            for ref in self._referenced_uuids(record):
                if ref not in self._records:
                    raise CatalogError(self.source, f"{record['type']} {uuid} references unknown uuid '{ref}'")

    def _referenced_uuids(self, record: dict[str, Any]) -> Iterator[str]:
        cls = metadata_type(record["type"])
        for name in cls.reference_fields:
            if record.get(name):
                yield record[name]
        for name in cls.collection_fields:
            yield from record.get(name, [])
        for mapping in record.get("mappings", []):
            yield mapping["source"]

    def get_by_uuid(self, item_type: str, uuid: str) -> MetadataObject:
        """
        Load a record with its references linked.

        Raises:
            UnknownMetadataType: If item_type is not registered
            MetadataNotFound: If no record of that type has the uuid
        """
        metadata_type(item_type)
        record = self._records.get(uuid)
        if record is None or record["type"] != item_type:
            raise MetadataNotFound(item_type, uuid)
        return self._materialize(uuid)

    def clear_session(self) -> None:
        """Drop materialized records; later lookups build fresh objects."""
        if self._session:
            logger.debug(f"Releasing {len(self._session)} session records")
        self._session.clear()

    def items(self) -> list[Item]:
        """Every catalog record as an Item, in catalog order."""
        return [Item(type=r["type"], uuid=uuid) for uuid, r in self._records.items()]

    def __len__(self) -> int:
        return len(self._records)

    def _instantiate(self, uuid: str) -> MetadataObject:
        record = self._records[uuid]
        cls = metadata_type(record["type"])
        kwargs = {name: record[name] for name in cls.scalar_fields() if name in record}
        obj = cls(**kwargs)
        self._session[uuid] = obj
        return obj

    def _materialize(self, uuid: str) -> MetadataObject:
        if uuid in self._session:
            return self._session[uuid]

        root = self._instantiate(uuid)
        pending: list[MetadataObject] = [root]

        def resolve(ref: str) -> MetadataObject:
            if ref in self._session:
                return self._session[ref]
            obj = self._instantiate(ref)
            pending.append(obj)
            return obj

        # Objects are registered before linking so reference cycles resolve to the same instance
        while pending:
            obj = pending.pop()
            record = self._records[obj.uuid]
            cls = type(obj)
            for name in cls.reference_fields:
                ref = record.get(name)
                setattr(obj, name, resolve(ref) if ref else None)
            for name in cls.collection_fields:
                setattr(obj, name, [resolve(ref) for ref in record.get(name, [])])
            if isinstance(obj, Concept):
                obj.mappings = [
                    ConceptMapping(source=resolve(m["source"]), code=str(m["code"]))  # type: ignore[arg-type]
                    for m in record.get("mappings", [])
                ]

        return root
