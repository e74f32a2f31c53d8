"""Shared pytest fixtures for the Weaviate console test suite."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.services.connection_store import ConnectionStore


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def _reset_connection_store() -> Iterator[None]:
    """Drop the shared ConnectionStore between tests."""
    ConnectionStore.clear_instance()
    yield
    ConnectionStore.clear_instance()


# ---------------------------------------------------------------------------
# Schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def article_schema() -> dict[str, Any]:
    """A class with text, date, array and cross-reference properties."""
    return {
        "class": "Article",
        "description": "News articles",
        "vectorizer": "text2vec-openai",
        "properties": [
            {"name": "title", "dataType": ["text"]},
            {"name": "body", "dataType": ["text"]},
            {"name": "tags", "dataType": ["text[]"]},
            {"name": "wordCount", "dataType": ["int"]},
            {"name": "publishedAt", "dataType": ["date"]},
            {"name": "author", "dataType": ["Author"]},
        ],
    }


@pytest.fixture
def author_schema() -> dict[str, Any]:
    return {
        "class": "Author",
        "vectorizer": "none",
        "properties": [
            {"name": "name", "dataType": ["text"]},
            {"name": "born", "dataType": ["date"]},
        ],
    }


@pytest.fixture
def schema(article_schema: dict[str, Any], author_schema: dict[str, Any]) -> dict[str, Any]:
    return {"classes": [article_schema, author_schema]}


# ---------------------------------------------------------------------------
# Provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_provider(schema: dict[str, Any]) -> MagicMock:
    """A vector database provider whose schema holds Article and Author.

    ``get_class`` resolves against the fixture schema; every other async
    method is an ``AsyncMock`` for the test to configure.
    """
    provider = MagicMock(spec=IVectorDatabaseProvider)

    async def _get_class(name: str) -> dict[str, Any] | None:
        for class_schema in schema["classes"]:
            if class_schema["class"] == name:
                return class_schema
        return None

    provider.get_schema = AsyncMock(return_value=schema)
    provider.get_class = AsyncMock(side_effect=_get_class)
    provider.create_class = AsyncMock(return_value={})
    provider.delete_class = AsyncMock(return_value=None)
    provider.get_object = AsyncMock()
    provider.delete_object = AsyncMock(return_value=None)
    provider.batch_objects = AsyncMock(return_value=[])
    provider.graphql = AsyncMock(return_value={"data": {}})
    provider.aggregate_count = AsyncMock(return_value=0)
    provider.get_meta = AsyncMock(return_value={"version": "1.24.1"})
    provider.is_ready = AsyncMock(return_value=True)
    provider.create_backup = AsyncMock()
    provider.get_backup_status = AsyncMock()
    provider.restore_backup = AsyncMock()
    provider.get_restore_status = AsyncMock()
    provider.get_provider_name.return_value = "weaviate"
    provider.is_available.return_value = True
    return provider
