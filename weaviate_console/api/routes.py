"""FastAPI routes for the Weaviate console.

Each route is a thin adapter: it parses the request, calls one service, and
returns the service's model.  Errors raised by services are turned into
JSON bodies by :class:`ErrorHandlingMiddleware`.  Service dependencies are
resolved from ``app.state`` via FastAPI's ``Depends`` using the
``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                               Method   Description
# ─────────────────────────────────────────────────────────────────────
# /api/connection                        POST     Switch Weaviate instance
# /api/connection                        GET      Current connection state
# /api/collections                       GET      Classes, counts, overview
# /api/collection/{name}                 GET      One page of objects
# /api/collection/{name}                 DELETE   Delete selected objects
# /api/objects/{id}                      GET      Raw object pass-through
# /api/objects/{id}/embedding            GET      Vector summary
# /api/objects/{id}/relationships        GET      Parent/child chunks
# /api/search/{collection}               GET      BM25 keyword search
# /api/graphql                           POST     GraphQL pass-through
# /api/export/{collection}               GET      JSON or CSV download
# /api/import                            POST     Multipart JSON upload
# /api/backup                            POST/GET Start / poll a backup
# /api/restore                           POST/GET Start / poll a restore
# /api/health                            GET      Liveness + Weaviate ready
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response

import weaviate_console
from weaviate_console.api.schemas import (
    BackupRequest,
    CollectionsResponse,
    ConnectRequest,
    DeleteObjectsRequest,
    ErrorResponse,
    GraphQLRequest,
    HealthResponse,
    ImportResponse,
    WeaviateStatus,
)
from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.collection import CollectionInfo
from weaviate_console.models.connection import ConnectionResult, ConnectionState
from weaviate_console.models.objects import (
    DeleteResult,
    DocumentRelationships,
    ObjectPage,
    SearchResult,
    SortOrder,
    VectorSummary,
)
from weaviate_console.models.transfer import BackupBackend, BackupJob, ExportFormat, RestoreJob
from weaviate_console.services.backup_service import BackupService
from weaviate_console.services.collection_service import CollectionService
from weaviate_console.services.connection_service import ConnectionService
from weaviate_console.services.connection_store import ConnectionStore
from weaviate_console.services.export_service import ExportService
from weaviate_console.services.import_service import ImportService
from weaviate_console.services.object_service import ObjectService
from weaviate_console.services.query_service import QueryService
from weaviate_console.services.relationship_service import RelationshipService
from weaviate_console.utils.errors import InvalidRequestError
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Dependency helpers
#
# Each helper reads one component from app.state (populated at startup in
# main.py's build_components) and is exposed to routes as an Annotated alias.
# ---------------------------------------------------------------------------


def _get_connection_store(request: Request) -> ConnectionStore:
    return request.app.state.connection_store


def _get_provider(request: Request) -> IVectorDatabaseProvider:
    return request.app.state.provider


def _get_connection_service(request: Request) -> ConnectionService:
    return request.app.state.connection_service


def _get_collection_service(request: Request) -> CollectionService:
    return request.app.state.collection_service


def _get_object_service(request: Request) -> ObjectService:
    return request.app.state.object_service


def _get_relationship_service(request: Request) -> RelationshipService:
    return request.app.state.relationship_service


def _get_query_service(request: Request) -> QueryService:
    return request.app.state.query_service


def _get_export_service(request: Request) -> ExportService:
    return request.app.state.export_service


def _get_import_service(request: Request) -> ImportService:
    return request.app.state.import_service


def _get_backup_service(request: Request) -> BackupService:
    return request.app.state.backup_service


StoreDep = Annotated[ConnectionStore, Depends(_get_connection_store)]
ProviderDep = Annotated[IVectorDatabaseProvider, Depends(_get_provider)]
ConnectionServiceDep = Annotated[ConnectionService, Depends(_get_connection_service)]
CollectionServiceDep = Annotated[CollectionService, Depends(_get_collection_service)]
ObjectServiceDep = Annotated[ObjectService, Depends(_get_object_service)]
RelationshipServiceDep = Annotated[RelationshipService, Depends(_get_relationship_service)]
QueryServiceDep = Annotated[QueryService, Depends(_get_query_service)]
ExportServiceDep = Annotated[ExportService, Depends(_get_export_service)]
ImportServiceDep = Annotated[ImportService, Depends(_get_import_service)]
BackupServiceDep = Annotated[BackupService, Depends(_get_backup_service)]


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


@router.post(
    "/connection",
    response_model=ConnectionResult,
    responses={**_ERROR_RESPONSES, 401: {"model": ErrorResponse}},
    summary="Connect to a Weaviate instance",
)
async def connect(body: ConnectRequest, service: ConnectionServiceDep) -> ConnectionResult:
    return await service.connect(body.url, body.api_key)


@router.get(
    "/connection",
    response_model=ConnectionState,
    summary="Current connection settings",
)
async def get_connection(service: ConnectionServiceDep) -> ConnectionState:
    """Return the active URL and whether a key is set; the key itself is never returned."""
    return service.current_state()


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@router.get(
    "/collections",
    response_model=CollectionsResponse,
    responses=_ERROR_RESPONSES,
    summary="List collections with object counts",
)
async def list_collections(service: CollectionServiceDep) -> CollectionsResponse:
    collections: list[CollectionInfo] = await service.list_collections()
    return CollectionsResponse(
        collections=collections,
        overview=service.build_overview(collections),
    )


@router.get(
    "/collection/{name}",
    response_model=ObjectPage,
    responses=_ERROR_RESPONSES,
    summary="Browse one page of a collection",
)
async def get_collection_objects(
    name: str,
    service: CollectionServiceDep,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    sort_property: Annotated[str | None, Query(alias="sortProperty")] = None,
    sort_order: Annotated[SortOrder, Query(alias="sortOrder")] = "desc",
) -> ObjectPage:
    return await service.get_objects(
        name,
        limit=limit,
        offset=offset,
        sort_property=sort_property,
        sort_order=sort_order,
    )


@router.delete(
    "/collection/{name}",
    response_model=DeleteResult,
    responses=_ERROR_RESPONSES,
    summary="Delete selected objects",
)
async def delete_collection_objects(
    name: str,
    body: DeleteObjectsRequest,
    service: CollectionServiceDep,
) -> DeleteResult:
    return await service.delete_objects(name, body.object_ids)


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------


@router.get(
    "/objects/{object_id}",
    responses=_ERROR_RESPONSES,
    summary="Fetch a single object",
)
async def get_object(
    object_id: str,
    service: ObjectServiceDep,
    include: str | None = None,
) -> dict[str, Any]:
    return await service.get_object(object_id, include=include)


@router.get(
    "/objects/{object_id}/embedding",
    response_model=VectorSummary,
    responses=_ERROR_RESPONSES,
    summary="Summarise an object's embedding vector",
)
async def get_embedding(
    object_id: str,
    service: ObjectServiceDep,
    full: bool = False,
) -> VectorSummary:
    return await service.get_embedding(object_id, full=full)


@router.get(
    "/objects/{object_id}/relationships",
    response_model=DocumentRelationships,
    responses=_ERROR_RESPONSES,
    summary="Parent and child chunks of a document",
)
async def get_relationships(
    object_id: str,
    service: RelationshipServiceDep,
) -> DocumentRelationships:
    return await service.get_relationships(object_id)


# ---------------------------------------------------------------------------
# Search / GraphQL
# ---------------------------------------------------------------------------


@router.get(
    "/search/{collection}",
    response_model=SearchResult,
    responses=_ERROR_RESPONSES,
    summary="BM25 keyword search",
)
async def search(
    collection: str,
    service: QueryServiceDep,
    query: str | None = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SearchResult:
    return await service.search(collection, query, limit=limit, offset=offset)


@router.post(
    "/graphql",
    responses=_ERROR_RESPONSES,
    summary="Run a GraphQL query",
)
async def graphql(body: GraphQLRequest, service: QueryServiceDep) -> dict[str, Any]:
    return await service.run_graphql(body.query, body.variables)


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


@router.get(
    "/export/{collection}",
    responses=_ERROR_RESPONSES,
    summary="Download a collection as JSON or CSV",
)
async def export_collection(
    collection: str,
    service: ExportServiceDep,
    export_format: Annotated[ExportFormat, Query(alias="format")] = "json",
    include_vectors: Annotated[bool, Query(alias="includeVectors")] = False,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> Response:
    document = await service.export_collection(
        collection,
        include_vectors=include_vectors,
        limit=limit,
    )

    if export_format == "csv":
        if not document.objects:
            return PlainTextResponse("No data to export")
        return Response(
            content=service.render_csv(document.objects, include_vectors),
            media_type="text/csv",
            headers=_attachment(f"{collection}_export.csv"),
        )

    return Response(
        content=service.render_json(document),
        media_type="application/json",
        headers=_attachment(f"{collection}_export.json"),
    )


@router.post(
    "/import",
    response_model=ImportResponse,
    responses=_ERROR_RESPONSES,
    summary="Import objects from an exported JSON file",
)
async def import_file(
    service: ImportServiceDep,
    file: Annotated[UploadFile | None, File()] = None,
    create_schema: Annotated[str | None, Form(alias="createSchema")] = None,
    replace_existing: Annotated[str | None, Form(alias="replaceExisting")] = None,
) -> ImportResponse:
    if file is None:
        raise InvalidRequestError(message="File is required")

    content = await file.read()
    _logger.info("import_upload_received", filename=file.filename, size=len(content))
    results = await service.import_file(
        content,
        create_schema=create_schema == "true",
        replace_existing=replace_existing == "true",
    )
    return ImportResponse(results=results)


# ---------------------------------------------------------------------------
# Backup / restore
# ---------------------------------------------------------------------------


@router.post(
    "/backup",
    response_model=BackupJob,
    responses=_ERROR_RESPONSES,
    summary="Start a backup",
)
async def create_backup(body: BackupRequest, service: BackupServiceDep) -> BackupJob:
    return await service.create_backup(body.backup_id, body.backend, body.config)


@router.get(
    "/backup",
    responses=_ERROR_RESPONSES,
    summary="Backup status",
)
async def get_backup_status(
    service: BackupServiceDep,
    backup_id: Annotated[str | None, Query(alias="backupId")] = None,
    backend: BackupBackend = "filesystem",
) -> dict[str, Any]:
    return await service.backup_status(backup_id, backend)


@router.post(
    "/restore",
    response_model=RestoreJob,
    responses=_ERROR_RESPONSES,
    summary="Restore a backup",
)
async def restore_backup(body: BackupRequest, service: BackupServiceDep) -> RestoreJob:
    return await service.restore_backup(body.backup_id, body.backend, body.config)


@router.get(
    "/restore",
    responses=_ERROR_RESPONSES,
    summary="Restore status",
)
async def get_restore_status(
    service: BackupServiceDep,
    backup_id: Annotated[str | None, Query(alias="backupId")] = None,
    backend: BackupBackend = "filesystem",
) -> dict[str, Any]:
    return await service.restore_status(backup_id, backend)


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(store: StoreDep, provider: ProviderDep) -> HealthResponse:
    """Report liveness plus whether the configured Weaviate answers its readiness probe."""
    ready = await provider.is_ready() if provider.is_available() else False
    return HealthResponse(
        status="ok",
        version=weaviate_console.__version__,
        weaviate=WeaviateStatus(url=store.url, ready=ready),
    )
