"""Console services: one per area of the admin UI."""

from weaviate_console.services.backup_service import BackupService
from weaviate_console.services.collection_service import CollectionService
from weaviate_console.services.connection_service import ConnectionService
from weaviate_console.services.connection_store import ConnectionStore
from weaviate_console.services.export_service import ExportService
from weaviate_console.services.import_service import ImportService
from weaviate_console.services.object_service import ObjectService
from weaviate_console.services.query_service import QueryService
from weaviate_console.services.relationship_service import RelationshipService

__all__ = [
    "BackupService",
    "CollectionService",
    "ConnectionService",
    "ConnectionStore",
    "ExportService",
    "ImportService",
    "ObjectService",
    "QueryService",
    "RelationshipService",
]
