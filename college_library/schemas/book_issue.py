"""Book issue Pydantic schemas."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from college_library.models.book_issue import DisplayStatus, IssueStatus
from college_library.schemas.common import BaseSchema, PatchSchema, RecordSchema


class IssueCreate(BaseModel):
    """Schema for issuing a book to a student."""

    book_id: int
    student_id: int
    due_date: Optional[date] = Field(
        None,
        description="Defaults to the configured loan period from today",
        examples=["2024-03-15"],
    )


class IssueUpdate(PatchSchema):
    """Schema for rescheduling an outstanding issue."""

    due_date: date


class IssueRead(RecordSchema):
    """Stored ledger record."""

    id: int
    book_id: int
    student_id: int
    issue_date: date
    due_date: date
    status: IssueStatus
    return_date: Optional[date] = None


class IssueResponse(BaseSchema):
    """Schema for issue response, with the derived display status."""

    id: int
    book_id: int
    student_id: int
    issue_date: date
    due_date: date
    status: IssueStatus
    return_date: Optional[date] = None
    display_status: DisplayStatus
    is_overdue: bool
