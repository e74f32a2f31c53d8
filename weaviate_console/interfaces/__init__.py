"""Abstract provider interfaces."""

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider

__all__ = ["IVectorDatabaseProvider"]
