"""Backup and restore orchestration over Weaviate's backup module."""

from __future__ import annotations

from typing import Any

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.transfer import BackupJob, RestoreJob
from weaviate_console.utils.errors import InvalidRequestError
from weaviate_console.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_DEFAULT_PATH = "/tmp/weaviate-backups"
_DEFAULT_BACKEND = "filesystem"


class BackupService:
    """Starts backups and restores and reports their status.

    Parameters
    ----------
    provider:
        The vector database adapter.
    default_path:
        ``config.path`` sent with every request unless the caller sets one.
    default_backend:
        Backend used when the caller names none.
    """

    def __init__(
        self,
        provider: IVectorDatabaseProvider,
        default_path: str = _DEFAULT_PATH,
        default_backend: str = _DEFAULT_BACKEND,
    ) -> None:
        self._provider = provider
        self._default_path = default_path
        self._default_backend = default_backend

    def _merged_config(self, config: dict[str, Any] | None) -> dict[str, Any]:
        return {"path": self._default_path, **(config or {})}

    @staticmethod
    def _require_id(backup_id: str | None) -> str:
        if not backup_id or not backup_id.strip():
            raise InvalidRequestError(message="Backup ID is required")
        return backup_id

    async def create_backup(
        self,
        backup_id: str | None,
        backend: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> BackupJob:
        backup_id = self._require_id(backup_id)
        backend = backend or self._default_backend
        merged = self._merged_config(config)

        response = await self._provider.create_backup(backend, backup_id, merged)
        _logger.info("backup_started", backup_id=backup_id, backend=backend, status=response.get("status"))
        return BackupJob(
            backup_id=backup_id,
            backend=backend,
            status=response.get("status"),
            path=response.get("path"),
        )

    async def backup_status(self, backup_id: str | None, backend: str | None = None) -> dict[str, Any]:
        backup_id = self._require_id(backup_id)
        return await self._provider.get_backup_status(backend or self._default_backend, backup_id)

    async def restore_backup(
        self,
        backup_id: str | None,
        backend: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> RestoreJob:
        backup_id = self._require_id(backup_id)
        backend = backend or self._default_backend
        merged = self._merged_config(config)

        response = await self._provider.restore_backup(backend, backup_id, merged)
        _logger.info("restore_started", backup_id=backup_id, backend=backend, status=response.get("status"))
        return RestoreJob(
            backup_id=backup_id,
            backend=backend,
            status=response.get("status"),
        )

    async def restore_status(self, backup_id: str | None, backend: str | None = None) -> dict[str, Any]:
        backup_id = self._require_id(backup_id)
        return await self._provider.get_restore_status(backend or self._default_backend, backup_id)
