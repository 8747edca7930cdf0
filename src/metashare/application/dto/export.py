from pydantic import BaseModel, Field, field_validator

from ...domain.models.item import Item


class ItemSelection(BaseModel):
    """Selected metadata record, addressed by type and uuid."""

    type: str
    uuid: str

    def to_item(self) -> Item:
        return Item(type=self.type, uuid=self.uuid)


class ExportRequest(BaseModel):
    """Request DTO for package export use case."""

    name: str
    description: str = ""
    owner: str | None = None
    group_uuid: str | None = None  # New group when not provided
    version: int = 1
    items: list[ItemSelection] = Field(default_factory=list)
    persist: bool = True

    @field_validator("items", mode="before")
    @classmethod
    def parse_item_strings(cls, v):
        """Accept 'Type:uuid' strings alongside {type, uuid} mappings."""
        if isinstance(v, list):
            parsed = []
            for entry in v:
                if isinstance(entry, str):
                    item = Item.parse(entry)
                    parsed.append({"type": item.type, "uuid": item.uuid})
                else:
                    parsed.append(entry)
            return parsed
        return v


class ExportResult(BaseModel):
    """Result DTO for package export use case."""

    group_uuid: str
    version: int
    items_exported: int
    related_items: int
    chunks_written: int
    persisted: bool
    duration_seconds: float
    correlation_id: str | None = None
