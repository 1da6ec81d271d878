"""Pydantic schemas."""
from college_library.schemas.book import (
    AvailabilityAdjust,
    BookCreate,
    BookRead,
    BookUpdate,
)
from college_library.schemas.book_issue import (
    IssueCreate,
    IssueRead,
    IssueResponse,
    IssueUpdate,
)
from college_library.schemas.common import ErrorResponse

__all__ = [
    "AvailabilityAdjust",
    "BookCreate",
    "BookRead",
    "BookUpdate",
    "IssueCreate",
    "IssueRead",
    "IssueResponse",
    "IssueUpdate",
    "ErrorResponse",
]
