"""Service-level exceptions and their mapping to HTTP responses."""

from typing import Any, Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception raised by the service layer.

    Attributes:
        code: Machine readable error code, e.g. ``GOALS_NOT_FOUND``
        message: Human readable description
        details: Optional structured context returned to the client
    """

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(self.message)


class ErrorCodes:
    """Error code suffixes shared by every service."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    DATABASE_ERROR = "DATABASE_ERROR"
    CLIENT_UNAVAILABLE = "CLIENT_UNAVAILABLE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"


_STATUS_BY_SUFFIX = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCodes.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCodes.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCodes.CLIENT_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCodes.UPSTREAM_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def status_for_error(error: ServiceError) -> int:
    """Resolve the HTTP status code for a service error by its code suffix."""
    for suffix, status_code in _STATUS_BY_SUFFIX.items():
        if error.code.endswith(suffix):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(code: str, message: str, details: Optional[dict[str, Any]] = None) -> dict:
    """Build the JSON error envelope returned by every endpoint."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"error": error}
