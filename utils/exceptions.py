"""
Custom exception classes for the PAPI proxy.

Every exception that can reach a Flask route carries the HTTP status and the
``error`` kind rendered to the caller, so the registered error handlers can
turn it into a response without knowing where it came from.
"""

from typing import Any


class ProxyException(Exception):
    """Base exception for the PAPI proxy."""

    error: str = "proxy_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message or self.error)

    def to_dict(self) -> dict[str, Any]:
        """Build the caller-facing error body."""
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        if self.details:
            body["details"] = self.details
        return body


class ConfigValidationError(ProxyException):
    """Raised at startup when required configuration is missing or invalid.

    Only the names of the offending settings are recorded, never their values.
    """

    error = "configuration_error"

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class AuthorizationError(ProxyException):
    """Raised when the internal shared secret is absent or wrong."""

    error = "unauthorized"
    status_code = 401


class ValidationError(ProxyException):
    """Raised when a route-specific required field is missing."""

    error = "validation_error"
    status_code = 400

    @classmethod
    def missing_field(cls, field_name: str) -> "ValidationError":
        return cls(
            f"Missing required field: {field_name}",
            details={"field": field_name},
        )


class PolicyDisabledError(ProxyException):
    """Raised for routes that exist but are turned off by business policy."""

    error = "customer_creation_disabled"
    status_code = 400


class TokenExchangeError(ProxyException):
    """Raised when the OAuth2 client-credentials exchange fails.

    ``upstream_status`` is 0 when the authorization server could not be
    reached at all. ``upstream_body`` is kept for server-side diagnostics and
    is not part of the caller-facing body.
    """

    error = "token_exchange_failed"
    status_code = 502

    def __init__(
        self, message: str, upstream_status: int = 0, upstream_body: str = ""
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class UpstreamUnavailableError(ProxyException):
    """Raised when the partner API times out or refuses the connection."""

    error = "upstream_unavailable"
    status_code = 502


class ProxyError(ProxyException):
    """Unexpected local failure while proxying a request."""

    error = "proxy_error"
    status_code = 500
