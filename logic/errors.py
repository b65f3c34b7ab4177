"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Any, Dict, List


class VestureError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(VestureError):
    """Raised when input is malformed or a required field is missing."""

    status_code = 400

    def __init__(self, message: str, errors: List[Dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class Unauthenticated(VestureError):
    """Raised when no bearer token accompanies a protected request."""

    status_code = 401


class InvalidCredentials(Unauthenticated):
    """Raised when a login does not match a stored email and password."""


class Forbidden(VestureError):
    """Raised when a token is invalid or does not grant access to the resource."""

    status_code = 403


class NotFound(VestureError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class Conflict(VestureError):
    """Raised when the requested change collides with existing state.

    Duplicate emails, duplicate follows and self-follows all answer with 400,
    which is what clients of the API already expect.
    """

    status_code = 400


class UpstreamError(VestureError):
    """Raised when a third-party service cannot be reached or answers badly."""

    status_code = 502


class ServiceError(VestureError):
    """Raised when an unexpected store failure interrupts a service call."""

    status_code = 500


__all__ = [
    "VestureError",
    "ValidationFailed",
    "Unauthenticated",
    "InvalidCredentials",
    "Forbidden",
    "NotFound",
    "Conflict",
    "UpstreamError",
    "ServiceError",
]
