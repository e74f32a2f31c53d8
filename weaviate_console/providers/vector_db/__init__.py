"""Vector database provider adapters."""

from weaviate_console.providers.vector_db.weaviate_rest_provider import WeaviateRESTProvider

__all__ = ["WeaviateRESTProvider"]
