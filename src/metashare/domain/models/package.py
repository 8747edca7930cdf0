"""Domain models for exported packages."""

from __future__ import annotations

import uuid as uuid_lib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .item import Item

XML_PROLOGUE = '<?xml version="1.0" encoding="UTF-8"?>\n'


def wrap_with_prologue(text: str) -> str:
    """Prefix serialized text with the XML declaration and terminate it with a newline."""
    return f"{XML_PROLOGUE}{text}\n"


@dataclass(frozen=True)
class SerializedPackage:
    """
    Output of one successful export run.

    Fields:
        header: Serialized package descriptor (XML prologue included)
        metadata: Serialized chunk bodies in chunk order (XML prologue included)
    """

    header: str
    metadata: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate serialized package."""
        if not self.header:
            raise ValueError("header must be non-empty")
        # Accept any sequence of bodies but store an immutable tuple
        object.__setattr__(self, "metadata", tuple(self.metadata))

    @property
    def chunk_count(self) -> int:
        return len(self.metadata)


@dataclass
class ExportedPackage:
    """
    Descriptor of one export: what was selected, what was discovered, and the result.

    Attributes:
        name: Package name
        description: Package description
        owner: Owner (exporting user or organisation), optional
        group_uuid: Identifier shared by all versions of the package
        uuid: Identifier of this package version
        version: Version number within the group (>= 1)
        date_created: Creation timestamp
        items: Explicitly selected items, in selection order
        related_items: Items discovered through references during the last run
        serialized_package: Artifact of the last successful run (None until assembled)
    """

    name: str
    description: str = ""
    owner: str | None = None
    group_uuid: str = field(default_factory=lambda: str(uuid_lib.uuid4()))
    uuid: str = field(default_factory=lambda: str(uuid_lib.uuid4()))
    version: int = 1
    date_created: datetime = field(default_factory=datetime.now)
    items: list[Item] = field(default_factory=list)
    related_items: set[Item] = field(default_factory=set)
    serialized_package: SerializedPackage | None = None
    _selected: set[Item] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._selected = set(self.items)

    def add_item(self, item: Item) -> bool:
        """
        Append an explicit item, keeping selection order and ignoring duplicates.

        Returns:
            True if the item was added, False if already selected
        """
        if len(self._selected) != len(self.items):
            # items was changed directly; resync the membership index
            self._selected = set(self.items)
        if item in self._selected:
            return False
        self.items.append(item)
        self._selected.add(item)
        return True

    def sorted_related_items(self) -> list[Item]:
        """Related items in a stable (type, uuid) order."""
        return sorted(self.related_items, key=lambda i: (i.type, i.uuid))

    def to_dict(self) -> dict[str, Any]:
        """Summary of the descriptor as a JSON-compatible dict (artifact bodies excluded)."""
        return {
            "name": self.name,
            "description": self.description,
            "owner": self.owner,
            "group_uuid": self.group_uuid,
            "uuid": self.uuid,
            "version": self.version,
            "date_created": self.date_created.isoformat(),
            "items": [{"type": i.type, "uuid": i.uuid} for i in self.items],
            "related_items": [{"type": i.type, "uuid": i.uuid} for i in self.sorted_related_items()],
        }
