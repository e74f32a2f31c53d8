"""Collection listing, overview statistics, paging, and bulk deletion.

The object browser pages through a collection with ``Get`` queries over
every scalar property.  Sorting is offered on date properties only, which
matches what the table header makes clickable.
"""

from __future__ import annotations

import math

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.collection import (
    CollectionInfo,
    CollectionOverview,
    LargestCollection,
    PropertyInfo,
)
from weaviate_console.models.objects import DeleteResult, ObjectPage, SortOrder, SortSpec
from weaviate_console.utils.errors import (
    CollectionNotFoundError,
    InvalidRequestError,
    QueryError,
    WeaviateConsoleError,
)
from weaviate_console.utils.graphql import (
    build_get_query,
    extract_get_results,
    selectable_properties,
)
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_PAGE_SIZE = 250
_PAGE_ADDITIONAL = ("id", "creationTimeUnix", "lastUpdateTimeUnix")


class CollectionService:
    """Reads and mutates collections on behalf of the object browser.

    Parameters
    ----------
    provider:
        The vector database adapter.
    page_size:
        Default number of objects per page.
    """

    def __init__(self, provider: IVectorDatabaseProvider, page_size: int = _DEFAULT_PAGE_SIZE) -> None:
        self._provider = provider
        self._page_size = page_size

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_collections(self) -> list[CollectionInfo]:
        """All classes in the schema with their object counts.

        A class whose count cannot be read is reported with a count of 0
        rather than failing the whole listing.
        """
        schema = await self._provider.get_schema()
        collections: list[CollectionInfo] = []
        for class_schema in schema.get("classes") or []:
            name = class_schema.get("class", "")
            try:
                count = await self._provider.aggregate_count(name)
            except WeaviateConsoleError as exc:
                _logger.warning("collection_count_failed", collection=name, error=exc.message)
                count = 0
            collections.append(CollectionInfo.from_schema(class_schema, count=count))
        return collections

    @staticmethod
    def build_overview(collections: list[CollectionInfo]) -> CollectionOverview:
        """Totals, average, largest collection and distinct property types."""
        if not collections:
            return CollectionOverview()

        total_objects = sum(col.count for col in collections)
        # Round half up, as the UI displays it.
        average = math.floor(total_objects / len(collections) + 0.5)
        largest = max(collections, key=lambda col: col.count)
        property_types = {
            data_type
            for col in collections
            for prop in col.properties
            for data_type in prop.data_type
        }
        return CollectionOverview(
            total_collections=len(collections),
            total_objects=total_objects,
            average_objects=average,
            largest_collection=LargestCollection(name=largest.name, count=largest.count),
            property_types=sorted(property_types),
        )

    async def get_class_schema(self, collection: str) -> dict:
        class_schema = await self._provider.get_class(collection)
        if class_schema is None:
            raise CollectionNotFoundError(collection)
        return class_schema

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------

    async def get_objects(
        self,
        collection: str,
        limit: int | None = None,
        offset: int = 0,
        sort_property: str | None = None,
        sort_order: SortOrder = "desc",
    ) -> ObjectPage:
        """Fetch one page of objects, optionally sorted by a date property."""
        class_schema = await self.get_class_schema(collection)
        page_limit = limit or self._page_size

        sort: SortSpec | None = None
        if sort_property:
            self._check_sortable(class_schema, sort_property)
            sort = SortSpec(property=sort_property, order=sort_order)

        query = build_get_query(
            collection,
            selectable_properties(class_schema),
            additional=_PAGE_ADDITIONAL,
            limit=page_limit,
            offset=offset,
            sort=(sort.property, sort.order) if sort else None,
        )
        result = await self._provider.graphql(query, error_prefix="Failed to fetch data")
        if result.get("errors"):
            raise QueryError(message="Failed to fetch data", details=result["errors"])

        rows = extract_get_results(result, collection)
        return ObjectPage(
            data=rows,
            limit=page_limit,
            offset=offset,
            count=len(rows),
            has_more=len(rows) == page_limit,
            sort=sort,
        )

    @staticmethod
    def _check_sortable(class_schema: dict, sort_property: str) -> None:
        properties = {
            raw.get("name"): PropertyInfo.from_schema(raw)
            for raw in class_schema.get("properties") or []
        }
        prop = properties.get(sort_property)
        if prop is None:
            raise InvalidRequestError(message=f'Unknown property "{sort_property}"')
        if not prop.sortable:
            raise InvalidRequestError(message="Sorting is only supported on date properties")

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def delete_objects(self, collection: str, object_ids: list[str]) -> DeleteResult:
        """Delete each selected object; failures are tallied, not raised."""
        if not object_ids:
            raise InvalidRequestError(message="No object IDs provided")

        deleted = 0
        errors: list[str] = []
        for object_id in object_ids:
            try:
                await self._provider.delete_object(collection, object_id)
            except WeaviateConsoleError as exc:
                errors.append(f"{object_id}: {exc.message}")
                continue
            deleted += 1

        _logger.info(
            "objects_deleted",
            collection=collection,
            deleted=deleted,
            failed=len(errors),
        )
        return DeleteResult(deleted=deleted, failed=len(errors), errors=errors)
