"""Collection export to JSON or CSV.

The JSON layout (:class:`ExportDocument`) is the same layout the import
endpoint accepts, so an export can be fed straight back in.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from typing import Any

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.transfer import ExportDocument
from weaviate_console.utils.errors import CollectionNotFoundError, QueryError
from weaviate_console.utils.graphql import (
    build_get_query,
    extract_get_results,
    selectable_properties,
)
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_LIMIT = 1000
_META_COLUMNS = ("id", "creationTimeUnix", "lastUpdateTimeUnix")


def _utc_timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def csv_cell(value: Any) -> str:
    """Flatten a property value into one CSV cell."""
    if value is None:
        return ""
    if isinstance(value, list):
        return ";".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


class ExportService:
    """Reads a collection and renders it for download."""

    def __init__(self, provider: IVectorDatabaseProvider, default_limit: int = _DEFAULT_LIMIT) -> None:
        self._provider = provider
        self._default_limit = default_limit

    async def export_collection(
        self,
        collection: str,
        include_vectors: bool = False,
        limit: int | None = None,
    ) -> ExportDocument:
        class_schema = await self._provider.get_class(collection)
        if class_schema is None:
            raise CollectionNotFoundError(collection)

        additional = list(_META_COLUMNS)
        if include_vectors:
            additional.append("vector")

        query = build_get_query(
            collection,
            selectable_properties(class_schema),
            additional=additional,
            limit=limit or self._default_limit,
        )
        result = await self._provider.graphql(query, error_prefix="Export failed")
        if result.get("errors"):
            raise QueryError(message="GraphQL query failed", details=result["errors"])

        objects = extract_get_results(result, collection)
        _logger.info(
            "collection_exported",
            collection=collection,
            objects=len(objects),
            include_vectors=include_vectors,
        )
        return ExportDocument(
            collection=collection,
            class_schema=class_schema,
            exported_at=_utc_timestamp(),
            total_objects=len(objects),
            include_vectors=include_vectors,
            objects=objects,
        )

    @staticmethod
    def render_json(document: ExportDocument) -> str:
        return document.model_dump_json(by_alias=True, indent=2)

    @staticmethod
    def render_csv(objects: list[dict[str, Any]], include_vectors: bool = False) -> str:
        """Render export rows as CSV.

        Property columns are taken from the first row.  A row without a
        vector still gets an (empty) vector cell.
        """
        if not objects:
            return ""

        property_columns = [key for key in objects[0] if key != "_additional"]
        header = [*_META_COLUMNS, *property_columns]
        if include_vectors:
            header.append("vector")

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(header)
        for obj in objects:
            additional = obj.get("_additional") or {}
            row = [csv_cell(additional.get(column)) for column in _META_COLUMNS]
            row.extend(csv_cell(obj.get(column)) for column in property_columns)
            if include_vectors:
                row.append(csv_cell(additional.get("vector")))
            writer.writerow(row)
        return buffer.getvalue()
