"""
Exception hierarchy for the Lingo services.

All service errors inherit from LingoError, which carries an HTTP status,
a machine-readable error code and a details dict naming the offending
field or resource. The API converts these into JSON error responses.
"""

from typing import Any


class LingoError(Exception):
    """Base exception for all service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for JSON serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(LingoError):
    """Referenced resource does not exist."""

    def __init__(self, resource: str, identifier: Any | None = None):
        msg = f"{resource} not found"
        details: dict[str, Any] = {"resource": resource}
        if identifier is not None:
            msg = f"{resource} not found: {identifier}"
            details["id"] = identifier
        super().__init__(msg, f"{resource.upper().replace(' ', '_')}_NOT_FOUND", 404, details)


class ConflictError(LingoError):
    """Uniqueness violation or concurrent write on the same record.

    Callers may retry: the conflicting state can change between attempts.
    """

    def __init__(self, message: str, field: str | None = None, **details: Any):
        extra: dict[str, Any] = {"field": field} if field else {}
        extra.update(details)
        super().__init__(message, "CONFLICT", 409, extra)


class InvalidRequestError(LingoError):
    """Malformed input or a language that cannot be resolved."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "INVALID_REQUEST", 400, {"field": field} if field else {})


class ProviderError(LingoError):
    """Machine-translation provider failed or timed out."""

    def __init__(self, provider: str, message: str):
        super().__init__(
            f"{provider}: {message}",
            "PROVIDER_ERROR",
            502,
            {"provider": provider},
        )


class StorageError(LingoError):
    """Persistence layer fault; the unit of work was rolled back."""

    def __init__(self, message: str = "Storage operation failed", operation: str | None = None):
        super().__init__(
            message,
            "STORAGE_ERROR",
            500,
            {"operation": operation} if operation else {},
        )
