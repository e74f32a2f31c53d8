"""Import, export, backup and restore models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field

from weaviate_console.models.base import CamelModel

BackupBackend = Literal["filesystem", "s3", "gcs", "azure"]
ExportFormat = Literal["json", "csv"]


class ImportResult(CamelModel):
    """Per-file import tally returned to the UI."""

    model_config = ConfigDict(frozen=False)

    collection: str
    total_objects: int
    imported: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class ExportDocument(CamelModel):
    """JSON export file layout; also the accepted import layout."""

    collection: str
    class_schema: dict[str, Any] = Field(alias="schema")
    exported_at: str
    total_objects: int
    include_vectors: bool
    objects: list[dict[str, Any]] = Field(default_factory=list)


class BackupJob(CamelModel):
    success: bool = True
    backup_id: str
    backend: str
    status: str | None = None
    path: str | None = None


class RestoreJob(CamelModel):
    success: bool = True
    backup_id: str
    backend: str
    status: str | None = None
