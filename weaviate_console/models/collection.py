"""Collection models: schema properties, per-class info, and overview stats."""

from __future__ import annotations

from typing import Any

from pydantic import Field, computed_field

from weaviate_console.models.base import CamelModel


class PropertyInfo(CamelModel):
    """One property of a collection schema."""

    name: str
    data_type: list[str] = Field(default_factory=list)
    description: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def sortable(self) -> bool:
        # Only date columns are sortable in the object browser.
        return "date" in self.data_type

    @classmethod
    def from_schema(cls, raw: dict[str, Any]) -> PropertyInfo:
        return cls(
            name=raw.get("name", ""),
            data_type=list(raw.get("dataType") or []),
            description=raw.get("description"),
        )


class CollectionInfo(CamelModel):
    """A collection (Weaviate class) with its object count."""

    name: str
    description: str | None = None
    vectorizer: str | None = None
    count: int = 0
    properties: list[PropertyInfo] = Field(default_factory=list)

    @classmethod
    def from_schema(cls, raw: dict[str, Any], count: int = 0) -> CollectionInfo:
        return cls(
            name=raw.get("class", ""),
            description=raw.get("description"),
            vectorizer=raw.get("vectorizer"),
            count=count,
            properties=[PropertyInfo.from_schema(p) for p in raw.get("properties") or []],
        )


class LargestCollection(CamelModel):
    name: str
    count: int


class CollectionOverview(CamelModel):
    """Aggregate numbers shown above the collection list."""

    total_collections: int = 0
    total_objects: int = 0
    average_objects: int = 0
    largest_collection: LargestCollection | None = None
    property_types: list[str] = Field(default_factory=list)
