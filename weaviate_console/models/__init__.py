"""Console domain models: re-exports all public model classes."""

from weaviate_console.models.base import CamelModel
from weaviate_console.models.collection import (
    CollectionInfo,
    CollectionOverview,
    LargestCollection,
    PropertyInfo,
)
from weaviate_console.models.connection import (
    ConnectionResult,
    ConnectionState,
    ConnectionValidation,
    Endpoint,
)
from weaviate_console.models.objects import (
    DeleteResult,
    DocumentRelationships,
    ObjectPage,
    RelatedChunk,
    SearchResult,
    SortOrder,
    SortSpec,
    VectorSample,
    VectorSummary,
)
from weaviate_console.models.transfer import (
    BackupBackend,
    BackupJob,
    ExportDocument,
    ExportFormat,
    ImportResult,
    RestoreJob,
)

__all__ = [
    "BackupBackend",
    "BackupJob",
    "CamelModel",
    "CollectionInfo",
    "CollectionOverview",
    "ConnectionResult",
    "ConnectionState",
    "ConnectionValidation",
    "DeleteResult",
    "DocumentRelationships",
    "Endpoint",
    "ExportDocument",
    "ExportFormat",
    "ImportResult",
    "LargestCollection",
    "ObjectPage",
    "PropertyInfo",
    "RelatedChunk",
    "RestoreJob",
    "SearchResult",
    "SortOrder",
    "SortSpec",
    "VectorSample",
    "VectorSummary",
]
