"""Integration tests for the console API endpoints using TestClient.

The routes, middleware and real services are wired exactly as in
``create_app``; only the vector database provider is mocked.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from weaviate_console.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from weaviate_console.api.routes import router as api_router
from weaviate_console.config.settings import Settings
from weaviate_console.main import build_components
from weaviate_console.services.connection_store import ConnectionStore
from weaviate_console.utils.errors import ProviderUnavailableError, UpstreamError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_test_app(
    provider: MagicMock,
    settings: Settings | None = None,
) -> tuple[FastAPI, ConnectionStore]:
    """Create a FastAPI app whose services sit on a mocked provider."""
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)

    store = ConnectionStore(url="http://localhost:8080", environment="development")
    settings = settings or Settings(_env_file=None)
    components = build_components(
        settings,
        {},
        http_client=MagicMock(),
        connection_store=store,
        provider=provider,
    )

    for key, value in components.items():
        setattr(app.state, key, value)
    return app, store


@pytest.fixture
def app_and_store(mock_provider: MagicMock) -> tuple[FastAPI, ConnectionStore]:
    return _create_test_app(mock_provider)


@pytest.fixture
def client(app_and_store: tuple[FastAPI, ConnectionStore]) -> TestClient:
    return TestClient(app_and_store[0])


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


class TestConnection:
    def test_get_connection_hides_key(
        self, client: TestClient, app_and_store: tuple[FastAPI, ConnectionStore]
    ) -> None:
        app_and_store[1].api_key = "secret"
        response = client.get("/api/connection")
        assert response.status_code == 200
        body = response.json()
        assert body["url"] == "http://localhost:8080"
        assert body["hasApiKey"] is True
        assert "secret" not in response.text

    def test_connect_success(self, client: TestClient) -> None:
        response = client.post("/api/connection", json={"url": "weaviate.internal:9090", "apiKey": ""})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["url"] == "http://weaviate.internal:9090"
        assert body["newConnection"] is True
        assert body["grpcPort"] == 50051
        assert body["version"] == "1.24.1"

    def test_connect_validation_error(self, client: TestClient) -> None:
        response = client.post("/api/connection", json={"url": "", "apiKey": ""})
        assert response.status_code == 400
        assert response.json()["error"] == "Weaviate URL is required"

    def test_connect_unreachable(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_meta = AsyncMock(side_effect=ProviderUnavailableError(details="refused"))
        response = client.post("/api/connection", json={"url": "http://down:8080"})
        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "Failed to connect to Weaviate"
        assert body["hint"] == "Make sure Weaviate is running and reachable at http://down:8080"


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class TestCollections:
    def test_list(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.aggregate_count = AsyncMock(side_effect=[10, 5])
        response = client.get("/api/collections")
        assert response.status_code == 200
        body = response.json()
        assert [c["name"] for c in body["collections"]] == ["Article", "Author"]
        assert body["overview"]["totalObjects"] == 15
        assert body["overview"]["largestCollection"] == {"name": "Article", "count": 10}
        publish = [p for p in body["collections"][0]["properties"] if p["name"] == "publishedAt"][0]
        assert publish["dataType"] == ["date"]
        assert publish["sortable"] is True

    def test_page(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {"Article": [{"title": "a"}]}}})
        response = client.get(
            "/api/collection/Article",
            params={"limit": 1, "offset": 2, "sortProperty": "publishedAt", "sortOrder": "asc"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["hasMore"] is True
        assert body["sort"] == {"property": "publishedAt", "order": "asc"}

    def test_page_missing_collection(self, client: TestClient) -> None:
        response = client.get("/api/collection/Missing")
        assert response.status_code == 404
        assert response.json()["error"] == 'Collection "Missing" not found'

    def test_page_bad_sort(self, client: TestClient) -> None:
        response = client.get("/api/collection/Article", params={"sortProperty": "title"})
        assert response.status_code == 400

    def test_delete(self, client: TestClient, mock_provider: MagicMock) -> None:
        response = client.request("DELETE", "/api/collection/Article", json={"objectIds": ["a", "b"]})
        assert response.status_code == 200
        assert response.json() == {"deleted": 2, "failed": 0, "errors": []}

    def test_delete_empty(self, client: TestClient) -> None:
        response = client.request("DELETE", "/api/collection/Article", json={"objectIds": []})
        assert response.status_code == 400
        assert response.json()["error"] == "No object IDs provided"


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------


class TestObjects:
    def test_get_object(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_object = AsyncMock(return_value={"id": "abc", "class": "Article"})
        response = client.get("/api/objects/abc", params={"include": "vector"})
        assert response.status_code == 200
        assert response.json()["id"] == "abc"
        mock_provider.get_object.assert_awaited_once_with("abc", include="vector")

    def test_upstream_status_is_forwarded(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_object = AsyncMock(
            side_effect=UpstreamError(message="Failed to fetch object: Not Found", status_code=404)
        )
        response = client.get("/api/objects/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "Failed to fetch object: Not Found"

    def test_embedding(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_object = AsyncMock(return_value={"id": "abc", "vector": [3.0, 4.0]})
        response = client.get("/api/objects/abc/embedding")
        assert response.status_code == 200
        body = response.json()
        assert body["dimensions"] == 2
        assert body["norm"] == pytest.approx(5.0)
        assert len(body["histogram"]) == 20

    def test_embedding_missing(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_object = AsyncMock(return_value={"id": "abc"})
        response = client.get("/api/objects/abc/embedding")
        assert response.status_code == 404
        assert response.json()["error"] == "Object has no embedding vector"

    def test_relationships(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_object = AsyncMock(return_value={"id": "doc", "properties": {"fileId": "f"}})
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {}}})
        response = client.get("/api/objects/doc/relationships")
        assert response.status_code == 200
        body = response.json()
        assert body["fileId"] == "f"
        assert body["parentChunks"] == []
        assert body["childChunks"] == []


# ---------------------------------------------------------------------------
# Search / GraphQL
# ---------------------------------------------------------------------------


class TestSearch:
    def test_search(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {"Article": [{"title": "x"}]}}})
        response = client.get("/api/search/Article", params={"query": "x"})
        assert response.status_code == 200
        assert response.json() == {"data": [{"title": "x"}], "query": "x", "total": 1}

    def test_invalid_collection_name(self, client: TestClient, mock_provider: MagicMock) -> None:
        response = client.get("/api/search/Bad{Name}", params={"query": "x"})
        assert response.status_code == 400
        assert response.json()["error"] == 'Invalid collection name "Bad{Name}"'
        mock_provider.graphql.assert_not_awaited()

    def test_configured_default_limit(self, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {"Article": []}}})
        app, _ = _create_test_app(mock_provider, Settings(_env_file=None, search_default_limit=7))

        response = TestClient(app).get("/api/search/Article", params={"query": "x"})

        assert response.status_code == 200
        assert "limit: 7" in mock_provider.graphql.await_args.args[0]

    def test_search_without_query(self, client: TestClient) -> None:
        response = client.get("/api/search/Article")
        assert response.status_code == 400
        assert response.json() == {"error": "Search query is required", "details": None, "hint": None}

    def test_search_graphql_errors(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"errors": [{"message": "bad"}]})
        response = client.get("/api/search/Article", params={"query": "x"})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Search query failed",
            "details": [{"message": "bad"}],
            "hint": None,
        }

    def test_graphql_pass_through(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {}}})
        response = client.post("/api/graphql", json={"query": "{ Get { Article { title } } }"})
        assert response.status_code == 200
        assert response.json() == {"data": {"Get": {}}}

    def test_graphql_missing_query(self, client: TestClient) -> None:
        response = client.post("/api/graphql", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "GraphQL query is required"


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


_EXPORT_ROWS = [{"title": "x", "_additional": {"id": "1", "creationTimeUnix": "1", "lastUpdateTimeUnix": "2"}}]


class TestExport:
    def test_json(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {"Article": _EXPORT_ROWS}}})
        response = client.get("/api/export/Article")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.headers["content-disposition"] == 'attachment; filename="Article_export.json"'
        body = response.json()
        assert body["schema"]["class"] == "Article"
        assert body["totalObjects"] == 1

    def test_csv(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {"Article": _EXPORT_ROWS}}})
        response = client.get("/api/export/Article", params={"format": "csv"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == 'attachment; filename="Article_export.csv"'
        assert response.text.splitlines() == ["id,creationTimeUnix,lastUpdateTimeUnix,title", "1,1,2,x"]

    def test_csv_no_rows(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.graphql = AsyncMock(return_value={"data": {"Get": {"Article": []}}})
        response = client.get("/api/export/Article", params={"format": "csv"})
        assert response.status_code == 200
        assert response.text == "No data to export"

    def test_missing_collection(self, client: TestClient) -> None:
        response = client.get("/api/export/Missing")
        assert response.status_code == 404


class TestImport:
    def test_import(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.batch_objects = AsyncMock(return_value=[{"result": {}}])
        content = json.dumps({"collection": "Article", "objects": [{"title": "x"}]}).encode()

        response = client.post(
            "/api/import",
            files={"file": ("dump.json", content, "application/json")},
            data={"createSchema": "false", "replaceExisting": "false"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["results"] == {
            "collection": "Article",
            "totalObjects": 1,
            "imported": 1,
            "failed": 0,
            "errors": [],
        }

    def test_missing_file(self, client: TestClient) -> None:
        response = client.post("/api/import", data={"createSchema": "true"})
        assert response.status_code == 400
        assert response.json()["error"] == "File is required"

    def test_invalid_json(self, client: TestClient) -> None:
        response = client.post("/api/import", files={"file": ("dump.json", b"{oops", "application/json")})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON format"

    def test_non_object_entry_is_400(self, client: TestClient, mock_provider: MagicMock) -> None:
        content = json.dumps({"collection": "Article", "objects": ["oops"]}).encode()
        response = client.post("/api/import", files={"file": ("dump.json", content, "application/json")})
        assert response.status_code == 400
        assert response.json()["details"] == "objects[0] must be an object"
        mock_provider.batch_objects.assert_not_awaited()

    def test_non_string_collection_is_400(self, client: TestClient, mock_provider: MagicMock) -> None:
        content = json.dumps({"collection": 5, "schema": {"class": "Article"}, "objects": []}).encode()
        response = client.post(
            "/api/import",
            files={"file": ("dump.json", content, "application/json")},
            data={"createSchema": "true"},
        )
        assert response.status_code == 400
        mock_provider.create_class.assert_not_awaited()

    def test_create_schema_flag(self, client: TestClient, mock_provider: MagicMock) -> None:
        content = json.dumps({"collection": "New", "schema": {"class": "New"}, "objects": []}).encode()
        response = client.post(
            "/api/import",
            files={"file": ("dump.json", content, "application/json")},
            data={"createSchema": "true"},
        )
        assert response.status_code == 200
        mock_provider.create_class.assert_awaited_once_with({"class": "New"})


# ---------------------------------------------------------------------------
# Backup / restore
# ---------------------------------------------------------------------------


class TestBackup:
    def test_create(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.create_backup = AsyncMock(return_value={"status": "STARTED", "path": "/tmp/x"})
        response = client.post("/api/backup", json={"backupId": "b1"})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "backupId": "b1",
            "backend": "filesystem",
            "status": "STARTED",
            "path": "/tmp/x",
        }

    def test_create_without_id(self, client: TestClient) -> None:
        response = client.post("/api/backup", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Backup ID is required"

    def test_upstream_failure_status(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.create_backup = AsyncMock(
            side_effect=UpstreamError(
                message="Backup creation failed: Unprocessable Entity",
                status_code=422,
                details="backup already exists",
            )
        )
        response = client.post("/api/backup", json={"backupId": "b1"})
        assert response.status_code == 422
        assert response.json() == {
            "error": "Backup creation failed: Unprocessable Entity",
            "details": "backup already exists",
        }

    def test_status(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_backup_status = AsyncMock(return_value={"id": "b1", "status": "SUCCESS"})
        response = client.get("/api/backup", params={"backupId": "b1", "backend": "s3"})
        assert response.status_code == 200
        assert response.json()["status"] == "SUCCESS"
        mock_provider.get_backup_status.assert_awaited_once_with("s3", "b1")

    def test_restore(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.restore_backup = AsyncMock(return_value={"status": "STARTED"})
        response = client.post("/api/restore", json={"backupId": "b1", "backend": "gcs"})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "backupId": "b1",
            "backend": "gcs",
            "status": "STARTED",
        }

    def test_restore_status(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_restore_status = AsyncMock(return_value={"status": "TRANSFERRING"})
        response = client.get("/api/restore", params={"backupId": "b1"})
        assert response.status_code == 200
        assert response.json() == {"status": "TRANSFERRING"}


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


class TestHealth:
    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/api/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_generated(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert len(response.headers["X-Request-ID"]) == 32

    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["weaviate"] == {"url": "http://localhost:8080", "ready": True}

    def test_health_not_ready(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.is_ready = AsyncMock(return_value=False)
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["weaviate"]["ready"] is False


class TestErrorHandling:
    def test_unexpected_exception_is_500(self, client: TestClient, mock_provider: MagicMock) -> None:
        mock_provider.get_object = AsyncMock(side_effect=RuntimeError("kaboom"))
        response = client.get("/api/objects/abc")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "details": None, "hint": None}
        assert "kaboom" not in response.text
