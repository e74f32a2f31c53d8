"""Console API layer: routes, schemas, and middleware."""

from weaviate_console.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from weaviate_console.api.routes import router
from weaviate_console.api.schemas import (
    BackupRequest,
    CollectionsResponse,
    ConnectRequest,
    DeleteObjectsRequest,
    ErrorResponse,
    GraphQLRequest,
    HealthResponse,
    ImportResponse,
)

__all__ = [
    "BackupRequest",
    "CollectionsResponse",
    "ConnectRequest",
    "DeleteObjectsRequest",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "GraphQLRequest",
    "HealthResponse",
    "ImportResponse",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
]
