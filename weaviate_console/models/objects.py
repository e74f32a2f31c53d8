"""Object browsing models: pages, vector summaries, and chunk relationships."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from weaviate_console.models.base import CamelModel

SortOrder = Literal["asc", "desc"]


class SortSpec(CamelModel):
    property: str
    order: SortOrder = "desc"


class ObjectPage(CamelModel):
    """One page of ``Get`` results for the object browser."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    limit: int
    offset: int
    count: int
    has_more: bool
    sort: SortSpec | None = None


class VectorSample(CamelModel):
    index: int
    value: float


class VectorSummary(CamelModel):
    """Display statistics for an object's embedding vector."""

    object_id: str
    class_name: str | None = None
    dimensions: int
    min: float
    max: float
    norm: float
    mean: float
    histogram: list[int] = Field(default_factory=list)
    sample: list[VectorSample] = Field(default_factory=list)
    remaining: int = 0


class RelatedChunk(CamelModel):
    """A parent or child chunk linked to a document."""

    id: str | None = None
    preview: str = ""
    properties: dict[str, Any] = Field(default_factory=dict)


class DocumentRelationships(CamelModel):
    """A document with the parent and child chunks sharing its link value."""

    document: dict[str, Any]
    file_id: str | None = None
    parent_chunks: list[RelatedChunk] = Field(default_factory=list)
    child_chunks: list[RelatedChunk] = Field(default_factory=list)


class DeleteResult(CamelModel):
    """Outcome of deleting a selection of objects."""

    deleted: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class SearchResult(CamelModel):
    """BM25 matches for a keyword query."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    query: str
    total: int
