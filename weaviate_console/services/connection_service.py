"""Switches the console between Weaviate instances.

A proposed URL/API key pair is validated and probed against ``/v1/meta``
before it replaces the live configuration, so a typo in the UI never
leaves the console pointing at an unreachable endpoint.
"""

from __future__ import annotations

import structlog

from weaviate_console.interfaces.vector_database_provider import IVectorDatabaseProvider
from weaviate_console.models.connection import ConnectionResult, ConnectionState
from weaviate_console.services.connection_store import (
    ConnectionStore,
    normalize_url,
    parse_endpoint,
)
from weaviate_console.utils.errors import (
    AuthenticationError,
    ConnectionValidationError,
    ProviderUnavailableError,
    UpstreamError,
)
from weaviate_console.utils.logging import get_logger, redact_secret

_logger: structlog.BoundLogger = get_logger(__name__)

_AUTH_FAILURE_STATUSES = frozenset({401, 403})


class ConnectionService:
    """Validates, probes and applies connection changes."""

    def __init__(self, store: ConnectionStore, provider: IVectorDatabaseProvider) -> None:
        self._store = store
        self._provider = provider

    def current_state(self) -> ConnectionState:
        return self._store.state()

    async def connect(self, url: str, api_key: str = "") -> ConnectionResult:
        """Point the console at *url*.

        Raises
        ------
        ConnectionValidationError
            The URL/key combination is rejected before any request is made.
        ProviderUnavailableError
            Nothing answered at *url*.
        AuthenticationError
            Weaviate answered 401/403 to the probe.
        """
        formatted_url = normalize_url(url)
        candidate = ConnectionStore(
            url=formatted_url,
            api_key=api_key or "",
            environment=self._store.environment,
        )

        validation = candidate.validate_connection()
        if not validation.is_valid:
            raise ConnectionValidationError(
                message=validation.message or "Invalid connection configuration"
            )

        try:
            meta = await self._provider.get_meta(
                url=formatted_url,
                headers=candidate.get_auth_headers(),
            )
        except ProviderUnavailableError as exc:
            raise ProviderUnavailableError(
                message="Failed to connect to Weaviate",
                provider_name=exc.provider_name,
                details=exc.details,
                hint=f"Make sure Weaviate is running and reachable at {formatted_url}",
            ) from exc
        except UpstreamError as exc:
            if exc.status_code in _AUTH_FAILURE_STATUSES:
                raise AuthenticationError(
                    message="Weaviate rejected the provided credentials",
                    provider_name=exc.provider_name,
                    details=exc.details,
                    hint="Check that the API key is valid for this instance",
                ) from exc
            raise

        new_connection = normalize_url(self._store.url) != formatted_url
        self._store.url = formatted_url
        self._store.api_key = api_key or ""
        self._store.connection_id = self._store.generate_connection_id(formatted_url)

        _logger.info(
            "connection_updated",
            url=formatted_url,
            api_key=redact_secret(api_key),
            new_connection=new_connection,
            version=meta.get("version"),
        )

        endpoint = parse_endpoint(formatted_url)
        return ConnectionResult(
            url=formatted_url,
            new_connection=new_connection,
            connection_id=self._store.connection_id,
            version=meta.get("version"),
            host=endpoint.host,
            port=endpoint.port,
            grpc_port=endpoint.grpc_port,
        )
