"""Abstract base class for the vector database the console administers.

Defines the REST/GraphQL surface the services rely on.  The concrete
implementation (``WeaviateRESTProvider`` in
``weaviate_console/providers/vector_db/``) forwards each call over HTTP;
tests substitute an ``AsyncMock`` specced on this class.

All methods return the database's JSON unchanged.  Reshaping for display is
the job of the services layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IVectorDatabaseProvider(ABC):
    """Contract for the schema, object, query and backup endpoints.

    Errors
    ------
    Implementations raise :class:`~weaviate_console.utils.errors.UpstreamError`
    when the database answers with a non-2xx status and
    :class:`~weaviate_console.utils.errors.ProviderUnavailableError` when it
    cannot be reached.
    """

    # -- Schema ---------------------------------------------------------

    @abstractmethod
    async def get_schema(self) -> dict[str, Any]:
        """Return the full schema (``{"classes": [...]}``)."""

    @abstractmethod
    async def get_class(self, class_name: str) -> dict[str, Any] | None:
        """Return the schema of one class, or ``None`` if it does not exist."""

    @abstractmethod
    async def create_class(self, class_schema: dict[str, Any]) -> dict[str, Any]:
        """Create a class from its schema definition."""

    @abstractmethod
    async def delete_class(self, class_name: str) -> None:
        """Delete a class together with all of its objects."""

    # -- Objects --------------------------------------------------------

    @abstractmethod
    async def get_object(self, object_id: str, include: str | None = None) -> dict[str, Any]:
        """Fetch a single object; *include* is forwarded (e.g. ``"vector"``)."""

    @abstractmethod
    async def delete_object(self, class_name: str, object_id: str) -> None:
        """Delete one object of *class_name*."""

    @abstractmethod
    async def batch_objects(self, objects: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Create objects in one batch; returns one result entry per object."""

    # -- Queries --------------------------------------------------------

    @abstractmethod
    async def graphql(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        error_prefix: str = "GraphQL query failed",
    ) -> dict[str, Any]:
        """Run a GraphQL query.  ``errors`` in the body are returned, not raised.

        *error_prefix* heads the message of the error raised for a non-2xx
        answer, e.g. ``"Export failed: Bad Request"``.
        """

    @abstractmethod
    async def aggregate_count(self, class_name: str) -> int:
        """Return the number of objects in *class_name*."""

    # -- Instance -------------------------------------------------------

    @abstractmethod
    async def get_meta(
        self,
        url: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Return instance metadata; *url*/*headers* probe a candidate endpoint."""

    @abstractmethod
    async def is_ready(self) -> bool:
        """Return True when the readiness probe succeeds."""

    # -- Backups --------------------------------------------------------

    @abstractmethod
    async def create_backup(
        self,
        backend: str,
        backup_id: str,
        config: dict[str, Any],
    ) -> dict[str, Any]:
        """Start a backup on *backend*."""

    @abstractmethod
    async def get_backup_status(self, backend: str, backup_id: str) -> dict[str, Any]:
        """Return the status of a backup."""

    @abstractmethod
    async def restore_backup(
        self,
        backend: str,
        backup_id: str,
        config: dict[str, Any],
    ) -> dict[str, Any]:
        """Start restoring a backup from *backend*."""

    @abstractmethod
    async def get_restore_status(self, backend: str, backup_id: str) -> dict[str, Any]:
        """Return the status of a restore."""

    # -- Identity -------------------------------------------------------

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs and error prefixes."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True when the provider has an endpoint configured."""
