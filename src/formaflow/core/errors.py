"""Application errors and the JSON body they are rendered as.

Every subclass fixes its machine-readable ``code`` and HTTP ``status_code``;
handlers in ``core.exception_handlers`` turn them into responses.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message, details=self.details or None)


class ValidationError(AppError):
    """Request data is well-formed but not acceptable."""

    code = "VALIDATION_ERROR"
    status_code = 422


class NotFoundError(AppError):
    """Resource doesn't exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            f"{resource} with ID {resource_id} not found",
            details={"resource": resource, "resource_id": resource_id},
        )


class ConflictError(AppError):
    """Duplicate resource, or the row changed since the caller read it."""

    code = "CONFLICT"
    status_code = 409


class InvalidStateError(AppError):
    """Transition not allowed from the session's current status."""

    code = "INVALID_STATE"
    status_code = 400


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(AppError):
    """Actor's role does not allow the action."""

    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "Forbidden", details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)


class DatabaseError(AppError):
    """A write failed and was rolled back."""

    code = "DATABASE_ERROR"
    status_code = 500
