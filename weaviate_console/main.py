"""Weaviate console FastAPI application entry point.

Wires the connection store, the Weaviate provider and every service
together and exposes them to the routes through ``app.state``.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging at import time.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

import weaviate_console
from weaviate_console.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from weaviate_console.api.routes import router as api_router
from weaviate_console.config.loader import load_config
from weaviate_console.config.settings import Settings
from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.providers.vector_db.weaviate_rest_provider import WeaviateRESTProvider
from weaviate_console.services.backup_service import BackupService
from weaviate_console.services.collection_service import CollectionService
from weaviate_console.services.connection_service import ConnectionService
from weaviate_console.services.connection_store import ConnectionStore, normalize_url
from weaviate_console.services.export_service import ExportService
from weaviate_console.services.import_service import ImportService
from weaviate_console.services.object_service import ObjectService
from weaviate_console.services.query_service import QueryService
from weaviate_console.services.relationship_service import RelationshipService
from weaviate_console.utils.logging import configure_logging, get_logger, redact_secret

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=settings.is_production(),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component construction
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings,
    app_config: dict[str, Any],
    http_client: httpx.AsyncClient | None = None,
    connection_store: ConnectionStore | None = None,
    provider: IVectorDatabaseProvider | None = None,
) -> dict[str, Any]:
    """Construct the provider and every service.

    Returns a flat dict of named components; the web app stores them on
    ``app.state`` and the CLI uses them directly.
    """
    # -- Shared resources --
    if http_client is None:
        http_client = httpx.AsyncClient(timeout=app_settings.request_timeout)
    store = connection_store or ConnectionStore.get_instance(
        initial_url=normalize_url(app_settings.weaviate_url),
        initial_api_key=app_settings.weaviate_api_key,
        environment=app_settings.app_env,
    )

    # -- Provider --
    if provider is None:
        provider = WeaviateRESTProvider(
            http_client=http_client,
            connection_store=store,
            timeout=app_settings.request_timeout,
        )

    # -- Services --
    return {
        "http_client": http_client,
        "connection_store": store,
        "provider": provider,
        "connection_service": ConnectionService(store=store, provider=provider),
        "collection_service": CollectionService(
            provider=provider,
            page_size=app_settings.objects_page_size,
        ),
        "object_service": ObjectService(
            provider=provider,
            embedding_config=app_config.get("embeddings"),
        ),
        "relationship_service": RelationshipService(
            provider=provider,
            relationship_config=app_config.get("relationships"),
        ),
        "query_service": QueryService(
            provider=provider,
            property_limit=app_settings.search_property_limit,
            default_limit=app_settings.search_default_limit,
        ),
        "export_service": ExportService(
            provider=provider,
            default_limit=app_settings.export_default_limit,
        ),
        "import_service": ImportService(
            provider=provider,
            batch_size=app_settings.import_batch_size,
        ),
        "backup_service": BackupService(
            provider=provider,
            default_path=app_settings.backup_default_path,
            default_backend=app_settings.backup_default_backend,
        ),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build all components on startup and close the HTTP client on shutdown."""
    components = build_components(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    store: ConnectionStore = components["connection_store"]
    _logger.info(
        "app_startup",
        version=weaviate_console.__version__,
        environment=settings.app_env,
        weaviate_url=store.url or "undefined",
        api_key=redact_secret(store.api_key),
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Weaviate Console API",
        version=weaviate_console.__version__,
        description=(
            "Browse, search, import, export and back up the collections of a "
            "Weaviate vector database."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.cors_allowed_origins)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()


def run_server(host: str | None = None, port: int | None = None, reload: bool | None = None) -> None:
    """Serve :data:`app` with uvicorn."""
    uvicorn.run(
        "weaviate_console.main:app",
        host=host or settings.app_host,
        port=port or settings.app_port,
        reload=settings.app_env == "development" if reload is None else reload,
    )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    run_server()
