"""Parent/child chunk lookup for the document relationship view.

Documents are split into parent chunks and finer child chunks stored in
separate collections.  All three share a link property (``fileId`` by
default); the collections, selected fields and limits are read from the
``relationships`` block of config.yaml.
"""

from __future__ import annotations

from typing import Any

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.objects import DocumentRelationships, RelatedChunk
from weaviate_console.utils.errors import WeaviateConsoleError
from weaviate_console.utils.graphql import build_get_query, extract_get_results
from weaviate_console.utils.logging import get_logger
from weaviate_console.utils.text import preview

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULTS: dict[str, Any] = {
    "link_property": "fileId",
    "preview_length": 200,
    "parent": {
        "collection": "DocumentParentChunks",
        "limit": 50,
        "fields": ["content", "title", "productNumbers", "pageNumbers", "fileId"],
    },
    "child": {
        "collection": "DocumentChildChunks",
        "limit": 100,
        "fields": [
            "content",
            "productNumbers",
            "productNames",
            "keywords",
            "parentChunkId",
            "fileId",
        ],
    },
}


class RelationshipService:
    """Resolves the chunks that belong to a document."""

    def __init__(
        self,
        provider: IVectorDatabaseProvider,
        relationship_config: dict[str, Any] | None = None,
    ) -> None:
        self._provider = provider
        cfg = relationship_config or {}
        self._link_property: str = cfg.get("link_property", _DEFAULTS["link_property"])
        self._preview_length = int(cfg.get("preview_length", _DEFAULTS["preview_length"]))
        self._parent = {**_DEFAULTS["parent"], **(cfg.get("parent") or {})}
        self._child = {**_DEFAULTS["child"], **(cfg.get("child") or {})}

    async def get_relationships(self, object_id: str) -> DocumentRelationships:
        document = await self._provider.get_object(object_id)
        link_value = (document.get("properties") or {}).get(self._link_property)

        if not link_value:
            return DocumentRelationships(document=document, file_id=None)

        link_value = str(link_value)
        parent_chunks = await self._fetch_chunks(self._parent, link_value)
        child_chunks = await self._fetch_chunks(self._child, link_value)
        return DocumentRelationships(
            document=document,
            file_id=link_value,
            parent_chunks=parent_chunks,
            child_chunks=child_chunks,
        )

    async def _fetch_chunks(self, chunk_cfg: dict[str, Any], link_value: str) -> list[RelatedChunk]:
        collection = chunk_cfg["collection"]
        query = build_get_query(
            collection,
            chunk_cfg["fields"],
            limit=int(chunk_cfg["limit"]),
            where_equal=(self._link_property, link_value),
        )
        try:
            result = await self._provider.graphql(query)
        except WeaviateConsoleError as exc:
            _logger.warning("chunk_query_failed", collection=collection, error=exc.message)
            return []

        if result.get("errors"):
            _logger.warning("chunk_query_errors", collection=collection, errors=result["errors"])
            return []

        return [self._to_chunk(row) for row in extract_get_results(result, collection)]

    def _to_chunk(self, row: dict[str, Any]) -> RelatedChunk:
        additional = row.get("_additional") or {}
        properties = {key: value for key, value in row.items() if key != "_additional"}
        return RelatedChunk(
            id=additional.get("id"),
            preview=preview(properties.get("content"), self._preview_length),
            properties=properties,
        )
