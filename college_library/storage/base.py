"""Storage interfaces shared by the memory and SQL backends."""
from contextlib import AbstractAsyncContextManager
from typing import Any, Optional, Protocol

from college_library.models.book_issue import IssueStatus
from college_library.schemas.book import BookRead
from college_library.schemas.book_issue import IssueRead


class BookRepository(Protocol):
    """Repository interface for catalog records."""

    async def create(self, data: dict[str, Any]) -> BookRead:
        ...

    async def get(self, book_id: int, for_update: bool = False) -> BookRead:
        ...

    async def find_by_isbn(self, isbn: str) -> Optional[BookRead]:
        ...

    async def update(self, book_id: int, data: dict[str, Any]) -> BookRead:
        ...

    async def delete(self, book_id: int) -> None:
        ...

    async def list(self) -> list[BookRead]:
        ...


class IssueRepository(Protocol):
    """Repository interface for ledger records."""

    async def create(self, data: dict[str, Any]) -> IssueRead:
        ...

    async def get(self, issue_id: int) -> IssueRead:
        ...

    async def update(self, issue_id: int, data: dict[str, Any]) -> IssueRead:
        ...

    async def delete(self, issue_id: int) -> None:
        ...

    async def list(
        self,
        student_id: Optional[int] = None,
        book_id: Optional[int] = None,
        status: Optional[IssueStatus] = None,
    ) -> list[IssueRead]:
        ...


class UnitOfWork(Protocol):
    """Both repositories bound to one transaction."""

    books: BookRepository
    issues: IssueRepository


class Storage(Protocol):
    """Source of units of work.

    A unit of work commits when its block exits normally and discards every
    change when the block raises.
    """

    def unit_of_work(self) -> AbstractAsyncContextManager[UnitOfWork]:
        ...

    async def close(self) -> None:
        ...
