"""
Centralized error handling for Party Finder / catalog failures.
Domain errors are raised by services; routes map them to HTTP with to_http so they stay thin.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500

MSG_INTERNAL_ERROR = "Internal server error"


class PartyFinderError(Exception):
    """Base class for errors raised by gamecafe services."""

    status_code = STATUS_INTERNAL_ERROR


class PartyFinderValidationError(PartyFinderError):
    """Malformed filter/sort parameters, out-of-range days, unknown game ids."""

    status_code = STATUS_BAD_REQUEST


class AuthenticationRequiredError(PartyFinderError):
    status_code = STATUS_UNAUTHORIZED


class PermissionDeniedError(PartyFinderError):
    status_code = STATUS_FORBIDDEN


class NotFoundError(PartyFinderError):
    status_code = STATUS_NOT_FOUND


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code). First match wins.
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

ERROR_RULES: list[tuple[type[Exception], int]] = [
    (PartyFinderValidationError, STATUS_BAD_REQUEST),
    (AuthenticationRequiredError, STATUS_UNAUTHORIZED),
    (PermissionDeniedError, STATUS_FORBIDDEN),
    (NotFoundError, STATUS_NOT_FOUND),
]


def to_http(exc: Exception) -> HTTPException:
    """
    Map a service exception into an HTTPException.
    Known domain errors keep their message; anything else becomes a generic 500 so
    storage details never leak to clients.
    """
    if isinstance(exc, HTTPException):
        return exc
    for exc_type, status_code in ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=MSG_INTERNAL_ERROR)
