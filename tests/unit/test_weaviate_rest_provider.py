"""Unit tests for WeaviateRESTProvider over an httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from weaviate_console.providers.vector_db.weaviate_rest_provider import WeaviateRESTProvider
from weaviate_console.services.connection_store import ConnectionStore
from weaviate_console.utils.errors import (
    ConfigurationError,
    ProviderUnavailableError,
    QueryError,
    UpstreamError,
)

Handler = Callable[[httpx.Request], httpx.Response]


def _provider(
    handler: Handler,
    url: str = "http://weaviate.test:8080",
    api_key: str = "",
) -> WeaviateRESTProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    store = ConnectionStore(url=url, api_key=api_key)
    return WeaviateRESTProvider(http_client=client, connection_store=store)


class TestIdentity:
    def test_provider_name(self) -> None:
        provider = _provider(lambda request: httpx.Response(200))
        assert provider.get_provider_name() == "weaviate"

    def test_is_available_follows_store_url(self) -> None:
        assert _provider(lambda request: httpx.Response(200)).is_available() is True
        assert _provider(lambda request: httpx.Response(200), url="").is_available() is False


class TestSchema:
    @pytest.mark.asyncio
    async def test_get_schema_sends_auth_header(self) -> None:
        seen: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"classes": [{"class": "Article"}]})

        provider = _provider(handler, api_key="secret")
        schema = await provider.get_schema()

        assert schema == {"classes": [{"class": "Article"}]}
        assert str(seen["request"].url) == "http://weaviate.test:8080/v1/schema"
        assert seen["request"].headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_get_class_found_and_missing(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"classes": [{"class": "Article"}]})

        provider = _provider(handler)
        assert (await provider.get_class("Article")) == {"class": "Article"}
        assert await provider.get_class("Missing") is None

    @pytest.mark.asyncio
    async def test_create_class_failure_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, text="class name already exists")

        provider = _provider(handler)
        with pytest.raises(UpstreamError) as exc_info:
            await provider.create_class({"class": "Article"})

        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Failed to create schema: Unprocessable Entity"
        assert exc_info.value.details == "class name already exists"

    @pytest.mark.asyncio
    async def test_delete_class_path(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        await _provider(handler).delete_class("Article")
        assert seen[0].method == "DELETE"
        assert seen[0].url.path == "/v1/schema/Article"


class TestObjects:
    @pytest.mark.asyncio
    async def test_get_object_forwards_include(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "abc", "vector": [0.1]})

        obj = await _provider(handler).get_object("abc", include="vector")

        assert obj["id"] == "abc"
        assert seen[0].url.path == "/v1/objects/abc"
        assert seen[0].url.params["include"] == "vector"

    @pytest.mark.asyncio
    async def test_get_object_not_found_keeps_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        with pytest.raises(UpstreamError) as exc_info:
            await _provider(handler).get_object("nope")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Failed to fetch object: Not Found"

    @pytest.mark.asyncio
    async def test_delete_object_path(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        await _provider(handler).delete_object("Article", "abc")
        assert seen[0].url.path == "/v1/objects/Article/abc"

    @pytest.mark.asyncio
    async def test_batch_objects_wraps_payload(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=[{"result": {}}])

        result = await _provider(handler).batch_objects([{"class": "Article", "properties": {}}])

        assert seen[0] == {"objects": [{"class": "Article", "properties": {}}]}
        assert result == [{"result": {}}]


class TestQueries:
    @pytest.mark.asyncio
    async def test_graphql_omits_missing_variables(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {}})

        await _provider(handler).graphql("{ Get { Article { title } } }")
        assert seen[0] == {"query": "{ Get { Article { title } } }"}

    @pytest.mark.asyncio
    async def test_graphql_errors_are_returned(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"errors": [{"message": "bad"}]})

        result = await _provider(handler).graphql("{ bad }")
        assert result["errors"][0]["message"] == "bad"

    @pytest.mark.asyncio
    async def test_graphql_uses_error_prefix(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        with pytest.raises(UpstreamError) as exc_info:
            await _provider(handler).graphql("{ x }", error_prefix="Search failed")
        assert exc_info.value.message == "Search failed: Internal Server Error"

    @pytest.mark.asyncio
    async def test_aggregate_count(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"data": {"Aggregate": {"Article": [{"meta": {"count": 42}}]}}},
            )

        assert await _provider(handler).aggregate_count("Article") == 42

    @pytest.mark.asyncio
    async def test_aggregate_count_graphql_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"errors": [{"message": "no such class"}]})

        with pytest.raises(QueryError):
            await _provider(handler).aggregate_count("Article")


class TestInstance:
    @pytest.mark.asyncio
    async def test_get_meta_targets_candidate_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"version": "1.24.1"})

        provider = _provider(handler)
        meta = await provider.get_meta(
            url="http://other:8080",
            headers={"Authorization": "Bearer candidate"},
        )

        assert meta["version"] == "1.24.1"
        assert str(seen[0].url) == "http://other:8080/v1/meta"
        assert seen[0].headers["Authorization"] == "Bearer candidate"

    @pytest.mark.asyncio
    async def test_is_ready_true(self) -> None:
        assert await _provider(lambda request: httpx.Response(200)).is_ready() is True

    @pytest.mark.asyncio
    async def test_is_ready_false_on_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert await _provider(handler).is_ready() is False

    @pytest.mark.asyncio
    async def test_network_error_raises_provider_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await _provider(handler).get_schema()
        assert exc_info.value.status_code == 502
        assert "http://weaviate.test:8080" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_url_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            await _provider(lambda request: httpx.Response(200), url="").get_schema()


class TestBackups:
    @pytest.mark.asyncio
    async def test_create_backup(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "b1", "status": "STARTED", "path": "/tmp/b1"})

        result = await _provider(handler).create_backup("filesystem", "b1", {"path": "/tmp"})

        assert result["status"] == "STARTED"
        assert seen[0].url.path == "/v1/backups/filesystem"
        assert json.loads(seen[0].content) == {"id": "b1", "config": {"path": "/tmp"}}

    @pytest.mark.asyncio
    async def test_restore_backup(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "STARTED"})

        await _provider(handler).restore_backup("s3", "b1", {"path": "/tmp"})

        assert seen[0].url.path == "/v1/backups/s3/b1/restore"
        assert json.loads(seen[0].content) == {"config": {"path": "/tmp"}}

    @pytest.mark.asyncio
    async def test_status_paths(self) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"status": "SUCCESS"})

        provider = _provider(handler)
        await provider.get_backup_status("filesystem", "b1")
        await provider.get_restore_status("filesystem", "b1")

        assert paths == ["/v1/backups/filesystem/b1", "/v1/backups/filesystem/b1/restore"]

    @pytest.mark.asyncio
    async def test_restore_failure_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="backup not found")

        with pytest.raises(UpstreamError) as exc_info:
            await _provider(handler).restore_backup("filesystem", "missing", {})
        assert exc_info.value.message == "Restore failed: Not Found"
        assert exc_info.value.status_code == 404
