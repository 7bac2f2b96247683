"""
Error taxonomy.

Every failure the service can report is an ApiError tagged with an
ErrorKind. Domain kinds carry messages that are safe to show clients;
the INTERNAL kind marks faults whose details must stay server-side.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """What went wrong, and how it maps onto HTTP."""
    
    VALIDATION = "validation"
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"
    
    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]
    
    @property
    def is_domain(self) -> bool:
        """Domain errors can be surfaced to the caller verbatim."""
        return self is not ErrorKind.INTERNAL


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class ApiError(Exception):
    """Base for all errors the API turns into an error envelope."""
    
    kind: ErrorKind = ErrorKind.INTERNAL
    
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details
    
    @property
    def status_code(self) -> int:
        return self.kind.status_code
    
    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {
            "message": self.message,
            "statusCode": self.status_code,
        }
        if self.details is not None:
            error["details"] = self.details
        return error


class ValidationError(ApiError):
    """Malformed or missing input."""
    kind = ErrorKind.VALIDATION


class AuthError(ApiError):
    """Missing, invalid or expired token, or bad credentials."""
    kind = ErrorKind.AUTH


class ForbiddenError(ApiError):
    """Authenticated, but the role is not allowed here."""
    kind = ErrorKind.FORBIDDEN


class NotFoundError(ApiError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(ApiError):
    """Uniqueness violation."""
    kind = ErrorKind.CONFLICT


class InternalError(ApiError):
    """
    Unexpected fault, already sanitized.
    
    The message is generic; the original exception is kept as `cause`
    for logging and error tracking only.
    """
    kind = ErrorKind.INTERNAL
    
    def __init__(self, message: str = "Internal server error", cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
