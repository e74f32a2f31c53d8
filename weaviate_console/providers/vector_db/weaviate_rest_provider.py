"""Weaviate adapter over its REST and GraphQL HTTP API.

Issues every call through an injected ``httpx.AsyncClient``.  The base URL
and auth headers are read from the :class:`ConnectionStore` per request, so
repointing the console at another instance needs no provider rebuild.

Non-2xx answers become :class:`UpstreamError` carrying the upstream status
and body; transport failures become :class:`ProviderUnavailableError`.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.services.connection_store import ConnectionStore
from weaviate_console.utils.errors import (
    ConfigurationError,
    ProviderUnavailableError,
    QueryError,
    UpstreamError,
    WeaviateConsoleError,
)
from weaviate_console.utils.graphql import build_count_query, extract_count
from weaviate_console.utils.logging import get_logger

_PROVIDER_NAME = "weaviate"
_DEFAULT_TIMEOUT = 30.0


class WeaviateRESTProvider(IVectorDatabaseProvider):
    """Talks to a Weaviate instance over HTTP.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` for testability and connection pooling.
    connection_store:
        Source of the target URL and auth headers.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        connection_store: ConnectionStore,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._store = connection_store
        self._timeout = timeout
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        error_prefix: str,
        json: Any = None,
        params: dict[str, str] | None = None,
        url: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        base_url = (url or self._store.url).rstrip("/")
        if not base_url:
            raise ConfigurationError(
                message="Weaviate URL is not configured",
                provider_name=_PROVIDER_NAME,
            )

        target = f"{base_url}{path}"
        try:
            response = await self._http.request(
                method,
                target,
                json=json,
                params=params,
                headers=headers if headers is not None else self._store.get_auth_headers(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            self._logger.error(
                "weaviate_unreachable",
                method=method,
                path=path,
                error=str(exc),
            )
            raise ProviderUnavailableError(
                message=f"Failed to reach Weaviate at {base_url}",
                provider_name=_PROVIDER_NAME,
                details=str(exc),
            ) from exc

        if response.is_success:
            return response

        self._logger.warning(
            "weaviate_request_failed",
            method=method,
            path=path,
            status=response.status_code,
        )
        raise UpstreamError(
            message=f"{error_prefix}: {response.reason_phrase}",
            status_code=response.status_code,
            provider_name=_PROVIDER_NAME,
            details=response.text,
        )

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    async def get_schema(self) -> dict[str, Any]:
        response = await self._request("GET", "/v1/schema", error_prefix="Failed to fetch schema")
        return response.json()

    async def get_class(self, class_name: str) -> dict[str, Any] | None:
        schema = await self.get_schema()
        for class_schema in schema.get("classes") or []:
            if class_schema.get("class") == class_name:
                return class_schema
        return None

    async def create_class(self, class_schema: dict[str, Any]) -> dict[str, Any]:
        response = await self._request(
            "POST",
            "/v1/schema",
            error_prefix="Failed to create schema",
            json=class_schema,
        )
        return response.json() if response.content else {}

    async def delete_class(self, class_name: str) -> None:
        await self._request(
            "DELETE",
            f"/v1/schema/{quote(class_name, safe='')}",
            error_prefix="Failed to delete collection",
        )

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def get_object(self, object_id: str, include: str | None = None) -> dict[str, Any]:
        params = {"include": include} if include else None
        response = await self._request(
            "GET",
            f"/v1/objects/{quote(object_id, safe='')}",
            error_prefix="Failed to fetch object",
            params=params,
        )
        return response.json()

    async def delete_object(self, class_name: str, object_id: str) -> None:
        await self._request(
            "DELETE",
            f"/v1/objects/{quote(class_name, safe='')}/{quote(object_id, safe='')}",
            error_prefix="Failed to delete object",
        )

    async def batch_objects(self, objects: list[dict[str, Any]]) -> list[dict[str, Any]]:
        response = await self._request(
            "POST",
            "/v1/batch/objects",
            error_prefix="Batch import failed",
            json={"objects": objects},
        )
        return response.json() or []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def graphql(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        error_prefix: str = "GraphQL query failed",
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables
        response = await self._request(
            "POST",
            "/v1/graphql",
            error_prefix=error_prefix,
            json=payload,
        )
        return response.json()

    async def aggregate_count(self, class_name: str) -> int:
        result = await self.graphql(build_count_query(class_name))
        if result.get("errors"):
            raise QueryError(
                message=f'Failed to count objects in "{class_name}"',
                provider_name=_PROVIDER_NAME,
                details=result["errors"],
            )
        return extract_count(result, class_name)

    # ------------------------------------------------------------------
    # Instance
    # ------------------------------------------------------------------

    async def get_meta(
        self,
        url: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await self._request(
            "GET",
            "/v1/meta",
            error_prefix="Failed to connect to Weaviate",
            url=url,
            headers=headers,
        )
        return response.json()

    async def is_ready(self) -> bool:
        try:
            await self._request(
                "GET",
                "/v1/.well-known/ready",
                error_prefix="Readiness check failed",
            )
        except WeaviateConsoleError as exc:
            self._logger.info("weaviate_not_ready", reason=exc.message)
            return False
        return True

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    async def create_backup(
        self,
        backend: str,
        backup_id: str,
        config: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/v1/backups/{quote(backend, safe='')}",
            error_prefix="Backup creation failed",
            json={"id": backup_id, "config": config},
        )
        return response.json()

    async def get_backup_status(self, backend: str, backup_id: str) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"/v1/backups/{quote(backend, safe='')}/{quote(backup_id, safe='')}",
            error_prefix="Failed to get backup status",
        )
        return response.json()

    async def restore_backup(
        self,
        backend: str,
        backup_id: str,
        config: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/v1/backups/{quote(backend, safe='')}/{quote(backup_id, safe='')}/restore",
            error_prefix="Restore failed",
            json={"config": config},
        )
        return response.json()

    async def get_restore_status(self, backend: str, backup_id: str) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"/v1/backups/{quote(backend, safe='')}/{quote(backup_id, safe='')}/restore",
            error_prefix="Failed to get restore status",
        )
        return response.json()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        return bool(self._store.url)
