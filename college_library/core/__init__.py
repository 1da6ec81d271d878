"""Core utilities."""
from college_library.core.exceptions import (
    AlreadyReturnedError,
    AppException,
    InvalidStateError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from college_library.core.logging import get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Exceptions
    "AppException",
    "NotFoundError",
    "ValidationError",
    "UnavailableError",
    "InvalidStateError",
    "AlreadyReturnedError",
]
