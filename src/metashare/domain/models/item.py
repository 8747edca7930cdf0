from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .metadata import MetadataObject


@dataclass(frozen=True)
class Item:
    """
    Lightweight reference to a metadata record, the unit of package selection.

    Fields:
        type: Registered metadata type name (e.g., 'Concept', 'Location')
        uuid: Unique identifier of the record
    """

    type: str
    uuid: str

    def __post_init__(self) -> None:
        """Validate item reference."""
        if not self.type:
            raise ValueError("type must be non-empty")
        if not self.uuid:
            raise ValueError("uuid must be non-empty")

    @classmethod
    def value_of(cls, obj: MetadataObject) -> Item:
        """Build the item reference for a resolved metadata object."""
        return cls(type=obj.item_type, uuid=obj.uuid)

    @classmethod
    def parse(cls, value: str) -> Item:
        """
        Parse an item reference written as 'Type:uuid'.

        Args:
            value: Item reference string

        Returns:
            Item instance

        Raises:
            ValueError: If the string is not in 'Type:uuid' form
        """
        item_type, sep, uuid = value.partition(":")
        if not sep or not item_type.strip() or not uuid.strip():
            raise ValueError(f"Invalid item reference '{value}', expected 'Type:uuid'")
        return cls(type=item_type.strip(), uuid=uuid.strip())

    def __str__(self) -> str:
        return f"{self.type} [{self.uuid}]"
