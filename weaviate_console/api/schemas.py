"""Request/response schemas for the console API.

Bodies use camelCase on the wire (``apiKey``, ``objectIds``, ``backupId``)
to match the browser UI; the models inherit :class:`CamelModel` so Python
code keeps snake_case attribute names.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from weaviate_console.models.base import CamelModel
from weaviate_console.models.collection import CollectionInfo, CollectionOverview
from weaviate_console.models.transfer import BackupBackend, ImportResult


class ConnectRequest(CamelModel):
    """New Weaviate endpoint and optional API key."""

    url: str = ""
    api_key: str = ""


class DeleteObjectsRequest(CamelModel):
    object_ids: list[str] = Field(default_factory=list)


class GraphQLRequest(CamelModel):
    query: str | None = None
    variables: dict[str, Any] | None = None


class BackupRequest(CamelModel):
    """Body for both ``POST /api/backup`` and ``POST /api/restore``."""

    backup_id: str | None = None
    backend: BackupBackend = "filesystem"
    config: dict[str, Any] = Field(default_factory=dict)


class CollectionsResponse(CamelModel):
    collections: list[CollectionInfo] = Field(default_factory=list)
    overview: CollectionOverview


class ImportResponse(CamelModel):
    success: bool = True
    results: ImportResult


class WeaviateStatus(CamelModel):
    url: str
    ready: bool


class HealthResponse(CamelModel):
    """Application health check response."""

    status: str
    version: str
    weaviate: WeaviateStatus


class ErrorResponse(CamelModel):
    """Standard error response body."""

    error: str
    details: Any = None
    hint: str | None = None
