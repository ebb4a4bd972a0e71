"""Domain exceptions raised by services and rendered by the API layer.

Every exception carries a stable machine-readable ``kind`` and the HTTP
status it maps to. Routers let these propagate; ``src.main`` turns them
into ``{"detail": ..., "kind": ...}`` responses.
"""

from fastapi import status


class WinelogError(Exception):
    """Base exception for all domain errors."""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WinelogError):
    """Malformed or missing required input."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(WinelogError):
    """Missing, invalid or expired credentials."""

    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(UnauthorizedError):
    """Bearer token failed signature, expiry or kind checks."""


class ForbiddenError(WinelogError):
    """Valid credentials scoped to a different resource."""

    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(WinelogError):
    """Resource absent or not owned by the caller."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(WinelogError):
    """Duplicate unique value."""

    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


class ExpiredError(WinelogError):
    """Join code used after its invite window closed."""

    kind = "expired"
    status_code = status.HTTP_410_GONE
