"""Checkout ledger API routes."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from college_library.api.deps import get_ledger_service
from college_library.models.book_issue import DisplayStatus
from college_library.schemas.book_issue import (
    IssueCreate,
    IssueRead,
    IssueResponse,
    IssueUpdate,
)
from college_library.schemas.common import ErrorResponse
from college_library.services.ledger_service import LedgerService

router = APIRouter(
    prefix="/issues",
    tags=["Book issues"],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


def to_response(
    issue: IssueRead,
    service: LedgerService,
    as_of: Optional[date] = None,
) -> IssueResponse:
    """Attach the derived display status to a ledger record."""
    return IssueResponse(
        **issue.model_dump(),
        display_status=service.display_status(issue, as_of),
        is_overdue=service.is_overdue(issue, as_of),
    )


@router.get("", response_model=list[IssueResponse])
async def list_issues(
    status_filter: Optional[DisplayStatus] = Query(None, alias="status"),
    student_id: Optional[int] = None,
    book_id: Optional[int] = None,
    search: Optional[str] = Query(None, description="Matches the book title or ISBN"),
    service: LedgerService = Depends(get_ledger_service),
) -> list[IssueResponse]:
    """List issue records with optional filtering."""
    issues = await service.list_issues(
        status=status_filter, student_id=student_id, book_id=book_id, search=search
    )
    return [to_response(i, service) for i in issues]


@router.get("/overdue", response_model=list[IssueResponse])
async def list_overdue(
    as_of: Optional[date] = None,
    service: LedgerService = Depends(get_ledger_service),
) -> list[IssueResponse]:
    """Outstanding issues whose due date has passed."""
    issues = await service.list_overdue(as_of=as_of)
    return [to_response(i, service, as_of) for i in issues]


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def issue_book(
    issue_data: IssueCreate,
    service: LedgerService = Depends(get_ledger_service),
) -> IssueResponse:
    """Issue a book to a student."""
    issue = await service.create_issue(issue_data)
    return to_response(issue, service)


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: int,
    service: LedgerService = Depends(get_ledger_service),
) -> IssueResponse:
    """Get an issue record by id."""
    return to_response(await service.get_issue(issue_id), service)


@router.patch("/{issue_id}", response_model=IssueResponse)
async def update_issue(
    issue_id: int,
    issue_data: IssueUpdate,
    service: LedgerService = Depends(get_ledger_service),
) -> IssueResponse:
    """Reschedule an outstanding issue."""
    return to_response(await service.update_issue(issue_id, issue_data), service)


@router.post("/{issue_id}/return", response_model=IssueResponse)
async def return_book(
    issue_id: int,
    service: LedgerService = Depends(get_ledger_service),
) -> IssueResponse:
    """Return an issued book."""
    return to_response(await service.return_book(issue_id), service)


@router.delete("/{issue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_issue(
    issue_id: int,
    service: LedgerService = Depends(get_ledger_service),
) -> None:
    """Delete an issue record, restoring its copy if still issued."""
    await service.delete_issue(issue_id)
