"""Single-object lookups and embedding vector summaries."""

from __future__ import annotations

import math
from typing import Any

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.objects import VectorSample, VectorSummary
from weaviate_console.utils.errors import ObjectNotFoundError
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_BUCKETS = 20
_DEFAULT_SAMPLE_SIZE = 20


def extract_vector(obj: dict[str, Any]) -> list[float] | None:
    """Return the object's vector: ``vector``, then ``vectors.default``, then
    the first named vector.  ``None`` when the object carries none."""
    vector = obj.get("vector")
    if vector:
        return list(vector)

    named = obj.get("vectors") or {}
    if named.get("default"):
        return list(named["default"])
    for candidate in named.values():
        # Multi-vector entries (lists of lists) are not summarised.
        if candidate and not isinstance(candidate[0], list):
            return list(candidate)
    return None


def histogram(values: list[float], buckets: int = _DEFAULT_BUCKETS) -> list[int]:
    """Bucket *values* into *buckets* equal-width bins over [min, max]."""
    counts = [0] * buckets
    if not values:
        return counts
    low, high = min(values), max(values)
    span = high - low
    for value in values:
        if span == 0:
            index = 0
        else:
            index = min(buckets - 1, math.floor((value - low) / span * buckets))
        counts[index] += 1
    return counts


def summarize_vector(
    object_id: str,
    vector: list[float],
    *,
    class_name: str | None = None,
    full: bool = False,
    buckets: int = _DEFAULT_BUCKETS,
    sample_size: int = _DEFAULT_SAMPLE_SIZE,
) -> VectorSummary:
    dimensions = len(vector)
    sample = vector if full else vector[:sample_size]
    return VectorSummary(
        object_id=object_id,
        class_name=class_name,
        dimensions=dimensions,
        min=min(vector),
        max=max(vector),
        norm=math.sqrt(sum(v * v for v in vector)),
        mean=sum(vector) / dimensions,
        histogram=histogram(vector, buckets),
        sample=[VectorSample(index=i, value=v) for i, v in enumerate(sample)],
        remaining=dimensions - len(sample),
    )


class ObjectService:
    """Fetches objects and summarises their embeddings.

    Parameters
    ----------
    provider:
        The vector database adapter.
    embedding_config:
        The ``embeddings`` block of config.yaml (``histogram_buckets``,
        ``sample_size``).
    """

    def __init__(
        self,
        provider: IVectorDatabaseProvider,
        embedding_config: dict[str, Any] | None = None,
    ) -> None:
        self._provider = provider
        cfg = embedding_config or {}
        self._buckets = int(cfg.get("histogram_buckets", _DEFAULT_BUCKETS))
        self._sample_size = int(cfg.get("sample_size", _DEFAULT_SAMPLE_SIZE))

    async def get_object(self, object_id: str, include: str | None = None) -> dict[str, Any]:
        return await self._provider.get_object(object_id, include=include)

    async def get_embedding(self, object_id: str, full: bool = False) -> VectorSummary:
        obj = await self._provider.get_object(object_id, include="vector")
        vector = extract_vector(obj)
        if not vector:
            raise ObjectNotFoundError(message="Object has no embedding vector")

        _logger.debug("embedding_loaded", object_id=object_id, dimensions=len(vector))
        return summarize_vector(
            obj.get("id") or object_id,
            vector,
            class_name=obj.get("class"),
            full=full,
            buckets=self._buckets,
            sample_size=self._sample_size,
        )
