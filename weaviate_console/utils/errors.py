"""Custom exception hierarchy for the Weaviate console.

All application exceptions inherit from :class:`WeaviateConsoleError`, which
carries an optional ``provider_name`` (the external service that caused the
failure), optional ``details`` forwarded to the client, and a class-level
``status_code`` that the HTTP error middleware uses for the response.

The hierarchy is organized by where the failure originates:

    WeaviateConsoleError  (base -- catch-all for any console error)
    +-- InvalidRequestError        (400: missing or malformed input)
    |   +-- ImportFormatError      (400: import file is not usable)
    |   +-- ConnectionValidationError (400: connection settings rejected)
    +-- QueryError                 (400: GraphQL responded with "errors")
    +-- AuthenticationError        (401: Weaviate rejected the API key)
    +-- CollectionNotFoundError    (404: class missing from the schema)
    +-- ObjectNotFoundError        (404: object or vector missing)
    +-- ConfigurationError         (500: startup / missing config)
    +-- UpstreamError              (Weaviate answered with a non-2xx status)
    +-- ProviderUnavailableError   (502: Weaviate unreachable)
"""

from __future__ import annotations

from typing import Any


class WeaviateConsoleError(Exception):
    """Base exception for all console errors.

    ``__str__`` prefixes the provider name in brackets for structured log
    output, e.g. ``[weaviate] Export failed: Not Found``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
        details: Any = None,
        hint: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        self._details = details
        self._hint = hint
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    @property
    def details(self) -> Any:
        return self._details

    @property
    def hint(self) -> str | None:
        return self._hint

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client-side errors
# ---------------------------------------------------------------------------

class InvalidRequestError(WeaviateConsoleError):
    """Raised when a request is missing required input or carries bad values."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
        details: Any = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details, hint=hint)


class ImportFormatError(InvalidRequestError):
    """Raised when an uploaded import file cannot be parsed or has the wrong shape."""

    def __init__(
        self,
        message: str = "Invalid import format. Expected: { collection, schema, objects }",
        provider_name: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details)


class ConnectionValidationError(InvalidRequestError):
    """Raised when a proposed connection configuration fails validation."""

    def __init__(
        self,
        message: str = "Invalid connection configuration",
        provider_name: str | None = None,
        details: Any = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details, hint=hint)


class QueryError(WeaviateConsoleError):
    """Raised when a GraphQL response carries an ``errors`` array."""

    status_code = 400

    def __init__(
        self,
        message: str = "GraphQL query failed",
        provider_name: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details)


class AuthenticationError(WeaviateConsoleError):
    """Raised when Weaviate rejects the configured credentials."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication with Weaviate failed",
        provider_name: str | None = None,
        details: Any = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details, hint=hint)


# ---------------------------------------------------------------------------
# Lookup errors
# ---------------------------------------------------------------------------

class CollectionNotFoundError(WeaviateConsoleError):
    """Raised when a collection (class) is not present in the schema."""

    status_code = 404

    def __init__(self, collection: str, provider_name: str | None = None) -> None:
        self.collection = collection
        super().__init__(
            message=f'Collection "{collection}" not found',
            provider_name=provider_name,
        )


class ObjectNotFoundError(WeaviateConsoleError):
    """Raised when an object, or the part of it a caller asked for, is missing."""

    status_code = 404

    def __init__(
        self,
        message: str = "Object not found",
        provider_name: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details)


# ---------------------------------------------------------------------------
# Server-side / upstream errors
# ---------------------------------------------------------------------------

class ConfigurationError(WeaviateConsoleError):
    """Raised when configuration is invalid or missing."""

    status_code = 500

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details)


class UpstreamError(WeaviateConsoleError):
    """Raised when Weaviate answers with a non-2xx status.

    The upstream status code is kept per instance so the console forwards
    it unchanged to the client.
    """

    def __init__(
        self,
        message: str = "Upstream request failed",
        status_code: int = 502,
        provider_name: str | None = None,
        details: Any = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message=message, provider_name=provider_name, details=details)


class ProviderUnavailableError(WeaviateConsoleError):
    """Raised when Weaviate cannot be reached at all (DNS, refused, timeout)."""

    status_code = 502

    def __init__(
        self,
        message: str = "Weaviate is unavailable",
        provider_name: str | None = None,
        details: Any = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, details=details, hint=hint)
