"""Custom exceptions for the application."""
from typing import Any, Optional


class AppException(Exception):
    """Base application exception."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Resource not found errors."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            f"{resource} with id {resource_id} not found",
            error_code="NOT_FOUND",
            details={"resource": resource, "id": resource_id},
        )


class ValidationError(AppException):
    """Validation errors."""

    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            error_code="VALIDATION_ERROR",
            details={"field": field} if field else {},
        )


class UnavailableError(AppException):
    """No copies of a book are left to issue."""

    status_code = 409

    def __init__(self, book_id: Any, message: Optional[str] = None):
        super().__init__(
            message or f"Book with id {book_id} is not available for issue",
            error_code="UNAVAILABLE",
            details={"book_id": book_id},
        )


class InvalidStateError(AppException):
    """Operation would break a record's state or count invariants."""

    status_code = 409

    def __init__(
        self,
        message: str,
        error_code: str = "INVALID_STATE",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, error_code=error_code, details=details)


class AlreadyReturnedError(InvalidStateError):
    """Issue record has already been returned."""

    def __init__(self, issue_id: Any):
        super().__init__(
            f"Book issue with id {issue_id} is already returned",
            error_code="ALREADY_RETURNED",
            details={"issue_id": issue_id},
        )
