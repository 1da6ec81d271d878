"""In-memory storage backend."""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from college_library.core.exceptions import NotFoundError
from college_library.models.book_issue import IssueStatus
from college_library.schemas.book import BookRead
from college_library.schemas.book_issue import IssueRead


def _next_id(rows: dict[int, Any]) -> int:
    return max(rows, default=0) + 1


class MemoryBookRepository:
    """Dict-based repository for books keyed by id."""

    def __init__(self, rows: dict[int, BookRead]):
        self.rows = rows

    async def create(self, data: dict[str, Any]) -> BookRead:
        obj = data.copy()
        obj.setdefault("id", _next_id(self.rows))
        book = BookRead.model_validate(obj)
        self.rows[book.id] = book
        return book

    async def get(self, book_id: int, for_update: bool = False) -> BookRead:
        try:
            return self.rows[book_id]
        except KeyError:
            raise NotFoundError("Book", book_id)

    async def find_by_isbn(self, isbn: str) -> Optional[BookRead]:
        for book in self.rows.values():
            if book.isbn == isbn:
                return book
        return None

    async def update(self, book_id: int, data: dict[str, Any]) -> BookRead:
        book = await self.get(book_id)
        book = book.model_copy(update=data)
        self.rows[book_id] = book
        return book

    async def delete(self, book_id: int) -> None:
        if book_id not in self.rows:
            raise NotFoundError("Book", book_id)
        del self.rows[book_id]

    async def list(self) -> list[BookRead]:
        return [self.rows[k] for k in sorted(self.rows)]


class MemoryIssueRepository:
    """Dict-based repository for issue records keyed by id."""

    def __init__(self, rows: dict[int, IssueRead]):
        self.rows = rows

    async def create(self, data: dict[str, Any]) -> IssueRead:
        obj = data.copy()
        obj.setdefault("id", _next_id(self.rows))
        issue = IssueRead.model_validate(obj)
        self.rows[issue.id] = issue
        return issue

    async def get(self, issue_id: int) -> IssueRead:
        try:
            return self.rows[issue_id]
        except KeyError:
            raise NotFoundError("Book issue", issue_id)

    async def update(self, issue_id: int, data: dict[str, Any]) -> IssueRead:
        issue = await self.get(issue_id)
        issue = issue.model_copy(update=data)
        self.rows[issue_id] = issue
        return issue

    async def delete(self, issue_id: int) -> None:
        if issue_id not in self.rows:
            raise NotFoundError("Book issue", issue_id)
        del self.rows[issue_id]

    async def list(
        self,
        student_id: Optional[int] = None,
        book_id: Optional[int] = None,
        status: Optional[IssueStatus] = None,
    ) -> list[IssueRead]:
        issues = [self.rows[k] for k in sorted(self.rows)]
        if student_id is not None:
            issues = [i for i in issues if i.student_id == student_id]
        if book_id is not None:
            issues = [i for i in issues if i.book_id == book_id]
        if status is not None:
            issues = [i for i in issues if i.status == status]
        return issues


class MemoryUnitOfWork:
    """Staged copies of both collections."""

    def __init__(self, books: dict[int, BookRead], issues: dict[int, IssueRead]):
        self.books = MemoryBookRepository(dict(books))
        self.issues = MemoryIssueRepository(dict(issues))


class MemoryStorage:
    """Process-local storage.

    Units of work run one at a time. Each stages its writes on copies of the
    book and issue tables, and the copies replace the live tables only when
    the block completes without raising.
    """

    def __init__(self) -> None:
        self._books: dict[int, BookRead] = {}
        self._issues: dict[int, IssueRead] = {}
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[MemoryUnitOfWork]:
        async with self._lock:
            uow = MemoryUnitOfWork(self._books, self._issues)
            yield uow
            self._books = uow.books.rows
            self._issues = uow.issues.rows

    async def close(self) -> None:
        return None
