"""Keyword (BM25) search and raw GraphQL pass-through."""

from __future__ import annotations

from typing import Any

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.objects import SearchResult
from weaviate_console.utils.errors import InvalidRequestError, QueryError, WeaviateConsoleError
from weaviate_console.utils.graphql import (
    build_get_query,
    extract_get_results,
    selectable_properties,
)
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_PROPERTY_LIMIT = 10
_DEFAULT_SEARCH_LIMIT = 50


class QueryService:
    """Runs searches and user-supplied GraphQL against the database.

    Parameters
    ----------
    provider:
        The vector database adapter.
    property_limit:
        How many properties a search result selects.  Wide classes produce
        very large queries otherwise.
    default_limit:
        Result count used when a search does not pass ``limit``.
    """

    def __init__(
        self,
        provider: IVectorDatabaseProvider,
        property_limit: int = _DEFAULT_PROPERTY_LIMIT,
        default_limit: int = _DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._provider = provider
        self._property_limit = property_limit
        self._default_limit = default_limit

    async def search(
        self,
        collection: str,
        query: str | None,
        limit: int | None = None,
        offset: int = 0,
    ) -> SearchResult:
        """BM25 keyword search over *collection*."""
        if not query:
            raise InvalidRequestError(message="Search query is required")

        properties = await self._search_properties(collection)
        graphql_query = build_get_query(
            collection,
            properties,
            additional=("id", "score"),
            limit=limit or self._default_limit,
            offset=offset,
            bm25_query=query,
        )
        result = await self._provider.graphql(graphql_query, error_prefix="Search failed")

        if result.get("errors"):
            _logger.warning("search_graphql_errors", collection=collection, errors=result["errors"])
            raise QueryError(message="Search query failed", details=result["errors"])

        rows = extract_get_results(result, collection)
        return SearchResult(data=rows, query=query, total=len(rows))

    async def _search_properties(self, collection: str) -> list[str]:
        # A schema lookup failure degrades to an id/score-only search.
        try:
            class_schema = await self._provider.get_class(collection)
        except WeaviateConsoleError as exc:
            _logger.warning("search_properties_unavailable", collection=collection, error=exc.message)
            return []
        return selectable_properties(class_schema)[: self._property_limit]

    async def run_graphql(
        self,
        query: str | None,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Forward a user query unchanged; GraphQL ``errors`` are returned as-is."""
        if not query:
            raise InvalidRequestError(message="GraphQL query is required")
        return await self._provider.graphql(query, variables)
