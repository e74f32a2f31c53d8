"""JSON file import into a collection.

Accepts the layout produced by the JSON export::

    {"collection": "Article", "schema": {...}, "objects": [{..., "_additional": {"id": ..., "vector": [...]}}]}

Objects are sent to the batch endpoint in fixed-size chunks.  A failing
batch is recorded in the result and the import moves on to the next one.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.transfer import ImportResult
from weaviate_console.utils.errors import (
    ImportFormatError,
    InvalidRequestError,
    UpstreamError,
    WeaviateConsoleError,
)
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_BATCH_SIZE = 100


def parse_import_payload(content: bytes | str) -> dict[str, Any]:
    """Decode and shape-check an uploaded import file."""
    try:
        text = content.decode("utf-8") if isinstance(content, bytes) else content
        payload = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidRequestError(message="Invalid JSON format", details=str(exc)) from exc

    return validate_import_payload(payload)


def validate_import_payload(payload: Any) -> dict[str, Any]:
    """Reject anything that is not the exported JSON layout."""
    if not isinstance(payload, dict):
        raise ImportFormatError()

    collection = payload.get("collection")
    objects = payload.get("objects")
    if not isinstance(collection, str) or not collection or not isinstance(objects, list):
        raise ImportFormatError()
    if payload.get("schema") is not None and not isinstance(payload["schema"], dict):
        raise ImportFormatError(details="schema must be an object")

    for index, obj in enumerate(objects):
        if not isinstance(obj, dict):
            raise ImportFormatError(details=f"objects[{index}] must be an object")
        if obj.get("_additional") is not None and not isinstance(obj["_additional"], dict):
            raise ImportFormatError(details=f"objects[{index}]._additional must be an object")
    return payload


def to_batch_object(collection: str, obj: dict[str, Any]) -> dict[str, Any]:
    """Turn an exported row into a batch-create entry."""
    additional = obj.get("_additional") or {}
    properties = {key: value for key, value in obj.items() if key != "_additional"}
    entry: dict[str, Any] = {"class": collection, "properties": properties}
    if additional.get("id"):
        entry["id"] = additional["id"]
    if additional.get("vector"):
        entry["vector"] = additional["vector"]
    return entry


def _item_error(item: dict[str, Any]) -> str | None:
    errors = (item.get("result") or {}).get("errors")
    if not errors:
        return None
    messages = errors.get("error") or []
    if messages and messages[0].get("message"):
        return messages[0]["message"]
    return "Unknown error"


class ImportService:
    """Creates or replaces a collection and loads objects into it."""

    def __init__(self, provider: IVectorDatabaseProvider, batch_size: int = _DEFAULT_BATCH_SIZE) -> None:
        self._provider = provider
        self._batch_size = batch_size

    async def import_file(
        self,
        content: bytes | str,
        create_schema: bool = False,
        replace_existing: bool = False,
    ) -> ImportResult:
        payload = parse_import_payload(content)
        return await self.import_payload(payload, create_schema, replace_existing)

    async def import_payload(
        self,
        payload: dict[str, Any],
        create_schema: bool = False,
        replace_existing: bool = False,
    ) -> ImportResult:
        validate_import_payload(payload)
        collection: str = payload["collection"]
        class_schema: dict[str, Any] | None = payload.get("schema")
        objects: list[dict[str, Any]] = payload["objects"]

        existing = await self._provider.get_class(collection)
        if existing is None:
            if not (create_schema and class_schema):
                raise InvalidRequestError(
                    message=(
                        f'Collection "{collection}" does not exist. '
                        'Enable "Create Schema" to create it.'
                    )
                )
            await self._create_schema(class_schema)
        elif replace_existing:
            await self._replace_collection(collection, class_schema)

        result = ImportResult(collection=collection, total_objects=len(objects))
        for batch_number, start in enumerate(range(0, len(objects), self._batch_size), start=1):
            batch = objects[start : start + self._batch_size]
            await self._import_batch(collection, batch, batch_number, result)

        _logger.info(
            "import_completed",
            collection=collection,
            total=result.total_objects,
            imported=result.imported,
            failed=result.failed,
        )
        return result

    async def _create_schema(self, class_schema: dict[str, Any]) -> None:
        try:
            await self._provider.create_class(class_schema)
        except UpstreamError as exc:
            raise InvalidRequestError(message="Failed to create schema", details=exc.details) from exc

    async def _replace_collection(self, collection: str, class_schema: dict[str, Any] | None) -> None:
        try:
            await self._provider.delete_class(collection)
            if class_schema:
                await self._provider.create_class(class_schema)
        except WeaviateConsoleError as exc:
            _logger.warning("replace_collection_failed", collection=collection, error=str(exc))

    async def _import_batch(
        self,
        collection: str,
        batch: list[dict[str, Any]],
        batch_number: int,
        result: ImportResult,
    ) -> None:
        entries = [to_batch_object(collection, obj) for obj in batch]
        try:
            items = await self._provider.batch_objects(entries)
        except UpstreamError as exc:
            self._record_batch_failure(result, len(batch), f"Batch {batch_number} failed: {exc.details}")
            return
        except WeaviateConsoleError as exc:
            self._record_batch_failure(result, len(batch), f"Batch {batch_number} error: {exc}")
            return

        for item in items:
            message = _item_error(item)
            if message is None:
                result.imported += 1
            else:
                result.failed += 1
                result.errors.append(message)

    @staticmethod
    def _record_batch_failure(result: ImportResult, size: int, message: str) -> None:
        _logger.warning("import_batch_failed", collection=result.collection, error=message)
        result.failed += size
        result.errors.append(message)
