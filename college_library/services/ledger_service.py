"""Checkout ledger service for issuing and returning books."""
from datetime import date, timedelta
from typing import Callable, Optional, Union

from college_library.core.exceptions import (
    AlreadyReturnedError,
    InvalidStateError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from college_library.core.logging import get_logger
from college_library.models.book_issue import DisplayStatus, IssueStatus
from college_library.schemas.book_issue import IssueCreate, IssueRead, IssueUpdate
from college_library.services.catalog_service import apply_adjustment, validate_payload
from college_library.storage.base import Storage

logger = get_logger("services.ledger")

DEFAULT_LOAN_DAYS = 14


def is_overdue(issue: IssueRead, as_of: Optional[date] = None) -> bool:
    """True iff the book is still out and its due date is strictly past."""
    as_of = as_of or date.today()
    return issue.status == IssueStatus.ISSUED and issue.due_date < as_of


def display_status(issue: IssueRead, as_of: Optional[date] = None) -> DisplayStatus:
    """Classify a record for display. Overdue is never stored."""
    if issue.status == IssueStatus.RETURNED:
        return DisplayStatus.RETURNED
    if is_overdue(issue, as_of):
        return DisplayStatus.OVERDUE
    return DisplayStatus.ISSUED


class LedgerService:
    """Service for the issue/return workflow.

    Every mutation that touches a book's copy count runs in the same unit of
    work as the ledger change, so either both land or neither does.
    """

    def __init__(
        self,
        storage: Storage,
        clock: Callable[[], date] = date.today,
        loan_days: int = DEFAULT_LOAN_DAYS,
    ):
        self.storage = storage
        self.clock = clock
        self.loan_days = loan_days

    def default_due_date(self, start: Optional[date] = None) -> date:
        """Due date one loan period after ``start`` (today by default)."""
        return (start or self.clock()) + timedelta(days=self.loan_days)

    def is_overdue(self, issue: IssueRead, as_of: Optional[date] = None) -> bool:
        return is_overdue(issue, as_of or self.clock())

    def display_status(self, issue: IssueRead, as_of: Optional[date] = None) -> DisplayStatus:
        return display_status(issue, as_of or self.clock())

    async def list_issues(
        self,
        status: Optional[Union[DisplayStatus, str]] = None,
        student_id: Optional[int] = None,
        book_id: Optional[int] = None,
        search: Optional[str] = None,
        as_of: Optional[date] = None,
    ) -> list[IssueRead]:
        """List ledger records.

        ``status`` filters on ``issued`` (every outstanding record, overdue
        ones included), ``returned`` or ``overdue``. ``search`` matches the
        issued book's title case-insensitively or its ISBN verbatim; records
        whose book no longer exists never match.
        """
        if status is not None:
            try:
                status = DisplayStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown issue status: {status}", field="status")

        stored = None
        if status == DisplayStatus.RETURNED:
            stored = IssueStatus.RETURNED
        elif status in (DisplayStatus.ISSUED, DisplayStatus.OVERDUE):
            stored = IssueStatus.ISSUED

        async with self.storage.unit_of_work() as uow:
            issues = await uow.issues.list(
                student_id=student_id, book_id=book_id, status=stored
            )
            if search:
                needle = search.lower()
                book_ids = {
                    b.id for b in await uow.books.list()
                    if needle in b.title.lower() or search in b.isbn
                }
                issues = [i for i in issues if i.book_id in book_ids]

        if status == DisplayStatus.OVERDUE:
            as_of = as_of or self.clock()
            issues = [i for i in issues if is_overdue(i, as_of)]
        return issues

    async def list_by_student(self, student_id: int) -> list[IssueRead]:
        return await self.list_issues(student_id=student_id)

    async def list_by_book(self, book_id: int) -> list[IssueRead]:
        return await self.list_issues(book_id=book_id)

    async def list_overdue(self, as_of: Optional[date] = None) -> list[IssueRead]:
        return await self.list_issues(status=DisplayStatus.OVERDUE, as_of=as_of)

    async def get_issue(self, issue_id: int) -> IssueRead:
        async with self.storage.unit_of_work() as uow:
            return await uow.issues.get(issue_id)

    async def issue_book(
        self,
        book_id: int,
        student_id: int,
        due_date: Optional[date] = None,
    ) -> IssueRead:
        """Issue one copy of a book to a student."""
        due_date = due_date or self.default_due_date()

        async with self.storage.unit_of_work() as uow:
            try:
                book = await uow.books.get(book_id, for_update=True)
            except NotFoundError:
                logger.warning(f"Issue rejected: book {book_id} does not exist")
                raise UnavailableError(book_id, f"Book with id {book_id} does not exist")
            if book.available_copies <= 0:
                logger.warning(f"Issue rejected: no copies of book {book_id} left")
                raise UnavailableError(book_id)

            issue = await uow.issues.create({
                "book_id": book_id,
                "student_id": student_id,
                "issue_date": self.clock(),
                "due_date": due_date,
                "status": IssueStatus.ISSUED,
                "return_date": None,
            })
            try:
                await apply_adjustment(uow, book_id, -1)
            except InvalidStateError:
                # Another unit of work took the last copy since the check above
                logger.warning(f"Issue rejected: no copies of book {book_id} left")
                raise UnavailableError(book_id)

        logger.info(
            f"Issued book {book_id} to student {student_id} as issue {issue.id}, "
            f"due {due_date.isoformat()}"
        )
        return issue

    async def create_issue(self, issue_data: Union[IssueCreate, dict]) -> IssueRead:
        """Issue a book from an ``{book_id, student_id, due_date}`` payload."""
        issue_data = validate_payload(IssueCreate, issue_data)
        return await self.issue_book(
            issue_data.book_id, issue_data.student_id, issue_data.due_date
        )

    async def return_book(self, issue_id: int) -> IssueRead:
        """Mark an issued record returned today and restore the copy."""
        async with self.storage.unit_of_work() as uow:
            issue = await uow.issues.get(issue_id)
            if issue.status == IssueStatus.RETURNED:
                logger.warning(f"Return rejected: issue {issue_id} already returned")
                raise AlreadyReturnedError(issue_id)

            issue = await uow.issues.update(issue_id, {
                "status": IssueStatus.RETURNED,
                "return_date": self.clock(),
            })
            await apply_adjustment(uow, issue.book_id, +1)

        logger.info(f"Returned issue {issue_id} (book {issue.book_id})")
        return issue

    async def update_issue(
        self,
        issue_id: int,
        issue_data: Union[IssueUpdate, dict],
    ) -> IssueRead:
        """Reschedule the due date of an outstanding issue."""
        issue_data = validate_payload(IssueUpdate, issue_data)

        async with self.storage.unit_of_work() as uow:
            issue = await uow.issues.get(issue_id)
            if issue.status == IssueStatus.RETURNED:
                raise InvalidStateError(
                    f"Book issue with id {issue_id} is returned and can no longer change",
                    details={"issue_id": issue_id},
                )
            issue = await uow.issues.update(issue_id, {"due_date": issue_data.due_date})

        logger.info(f"Issue {issue_id} now due {issue.due_date.isoformat()}")
        return issue

    async def delete_issue(self, issue_id: int) -> None:
        """Remove a record, restoring its copy first if it is still issued."""
        async with self.storage.unit_of_work() as uow:
            issue = await uow.issues.get(issue_id)
            if issue.status == IssueStatus.ISSUED:
                try:
                    await apply_adjustment(uow, issue.book_id, +1)
                except NotFoundError:
                    logger.warning(
                        f"Book {issue.book_id} of issue {issue_id} no longer exists; "
                        f"no copy to restore"
                    )
            await uow.issues.delete(issue_id)

        logger.info(f"Deleted issue {issue_id} ({issue.status.value})")
