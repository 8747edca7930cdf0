"""Domain models for exportable metadata records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from ..errors import UnknownMetadataType


@dataclass(eq=False)
class MetadataObject:
    """
    A resolved metadata record loaded from storage.

    Records compare by identity; use ``Item.value_of`` for (type, uuid) equality.
    Each kind declares the fields holding other records once, in
    ``reference_fields`` (single values) and ``collection_fields``
    (lists of records), and ``references()`` reports their current values.

    Fields:
        uuid: Unique identifier
        name: Display name (optional for some kinds)
        description: Free-text description (optional)
        retired: Whether the record is retired
        retire_reason: Reason for retirement (required when retired)
        creator: User account that created the record (optional)
    """

    item_type: ClassVar[str] = "Metadata"
    reference_fields: ClassVar[tuple[str, ...]] = ("creator",)
    collection_fields: ClassVar[tuple[str, ...]] = ()
    principal: ClassVar[bool] = False

    uuid: str
    name: str | None = None
    description: str | None = None
    retired: bool = False
    retire_reason: str | None = None
    creator: User | None = None

    def references(self) -> list[Any]:
        """
        Return the values of every referencing field, in declaration order.

        Single-valued fields contribute the value itself (possibly None);
        collection fields contribute the collection.
        """
        values: list[Any] = [getattr(self, name) for name in self.reference_fields]
        values.extend(getattr(self, name) for name in self.collection_fields)
        return values

    @classmethod
    def scalar_fields(cls) -> list[str]:
        """Names of plain-value fields (everything that is not a record reference)."""
        linked = set(cls.reference_fields) | set(cls.collection_fields) | set(cls.value_collection_fields())
        return [f.name for f in fields(cls) if f.name not in linked]

    @classmethod
    def value_collection_fields(cls) -> tuple[str, ...]:
        """Collection fields holding embedded values rather than records."""
        return ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uuid={self.uuid!r}, name={self.name!r})"


@dataclass(eq=False, repr=False)
class User(MetadataObject):
    """User account. Principals are never exported as package metadata."""

    item_type: ClassVar[str] = "User"
    principal: ClassVar[bool] = True

    username: str | None = None


@dataclass(eq=False, repr=False)
class Privilege(MetadataObject):
    item_type: ClassVar[str] = "Privilege"


@dataclass(eq=False, repr=False)
class Role(MetadataObject):
    item_type: ClassVar[str] = "Role"
    collection_fields: ClassVar[tuple[str, ...]] = ("privileges", "inherited_roles")

    privileges: list[Privilege] = field(default_factory=list)
    inherited_roles: list[Role] = field(default_factory=list)


@dataclass(eq=False, repr=False)
class Location(MetadataObject):
    item_type: ClassVar[str] = "Location"
    reference_fields: ClassVar[tuple[str, ...]] = ("creator", "parent_location")

    address: str | None = None
    parent_location: Location | None = None


@dataclass(eq=False, repr=False)
class EncounterType(MetadataObject):
    item_type: ClassVar[str] = "EncounterType"


@dataclass(eq=False, repr=False)
class Form(MetadataObject):
    item_type: ClassVar[str] = "Form"
    reference_fields: ClassVar[tuple[str, ...]] = ("creator", "encounter_type")

    version: str | None = None
    published: bool = False
    encounter_type: EncounterType | None = None


@dataclass(eq=False, repr=False)
class ConceptClass(MetadataObject):
    item_type: ClassVar[str] = "ConceptClass"


@dataclass(eq=False, repr=False)
class ConceptDatatype(MetadataObject):
    item_type: ClassVar[str] = "ConceptDatatype"

    hl7_abbreviation: str | None = None


@dataclass(eq=False, repr=False)
class ConceptSource(MetadataObject):
    item_type: ClassVar[str] = "ConceptSource"

    hl7_code: str | None = None


@dataclass(frozen=True)
class ConceptMapping:
    """
    Code for a concept within a concept source (embedded value, not a record).

    Fields:
        source: Concept source the code belongs to
        code: Code within the source
    """

    source: ConceptSource
    code: str


@dataclass(eq=False, repr=False)
class Concept(MetadataObject):
    """
    Coded concept. Answers and set members are concepts themselves; mapping
    sources are referenced through the embedded ``mappings`` values.
    """

    item_type: ClassVar[str] = "Concept"
    reference_fields: ClassVar[tuple[str, ...]] = ("creator", "datatype", "concept_class")
    collection_fields: ClassVar[tuple[str, ...]] = ("answers", "set_members")

    concept_id: int | None = None
    is_set: bool = False
    datatype: ConceptDatatype | None = None
    concept_class: ConceptClass | None = None
    answers: list[Concept] = field(default_factory=list)
    set_members: list[Concept] = field(default_factory=list)
    mappings: list[ConceptMapping] = field(default_factory=list)

    def references(self) -> list[Any]:
        values = super().references()
        values.append([mapping.source for mapping in self.mappings])
        return values

    @classmethod
    def value_collection_fields(cls) -> tuple[str, ...]:
        return ("mappings",)

    def has_mapping(self, source: ConceptSource, code: str) -> bool:
        """Check whether a mapping with the same source uuid and code exists."""
        return any(m.source.uuid == source.uuid and m.code == code for m in self.mappings)


METADATA_TYPES: dict[str, type[MetadataObject]] = {
    cls.item_type: cls
    for cls in (
        User,
        Privilege,
        Role,
        Location,
        EncounterType,
        Form,
        ConceptClass,
        ConceptDatatype,
        ConceptSource,
        Concept,
    )
}


def metadata_type(name: str) -> type[MetadataObject]:
    """
    Look up a registered metadata class by type name.

    Raises:
        UnknownMetadataType: If no kind is registered under ``name``
    """
    try:
        return METADATA_TYPES[name]
    except KeyError:
        raise UnknownMetadataType(name, sorted(METADATA_TYPES)) from None


def is_exportable(value: Any) -> bool:
    """Whether ``value`` is a metadata record that may be pulled into a package."""
    return isinstance(value, MetadataObject) and not value.principal
