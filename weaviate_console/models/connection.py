"""Connection models: validation outcome, parsed endpoint, and public state."""

from __future__ import annotations

from pydantic import Field

from weaviate_console.models.base import CamelModel


class ConnectionValidation(CamelModel):
    """Result of validating a connection configuration."""

    is_valid: bool
    message: str | None = None


class Endpoint(CamelModel):
    """Host and ports derived from a Weaviate URL."""

    host: str
    port: int
    grpc_port: int = 50051


class ConnectionState(CamelModel):
    """What the UI may know about the active connection. Never the key itself."""

    url: str
    has_api_key: bool
    api_key_required: bool
    connection_id: str = ""
    environment: str = "development"


class ConnectionResult(CamelModel):
    """Outcome of switching the console to a new Weaviate endpoint."""

    success: bool = True
    url: str
    new_connection: bool
    connection_id: str
    version: str | None = None
    host: str
    port: int
    grpc_port: int = Field(default=50051)
