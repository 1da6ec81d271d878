"""Borrower-scoped API routes."""
from fastapi import APIRouter, Depends

from college_library.api.deps import get_ledger_service
from college_library.api.issues import to_response
from college_library.schemas.book_issue import IssueResponse
from college_library.services.ledger_service import LedgerService

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/{student_id}/issues", response_model=list[IssueResponse])
async def list_student_issues(
    student_id: int,
    service: LedgerService = Depends(get_ledger_service),
) -> list[IssueResponse]:
    """Every issue record held by a student."""
    issues = await service.list_by_student(student_id)
    return [to_response(i, service) for i in issues]
