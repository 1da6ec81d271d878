"""SQLAlchemy storage backend."""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from college_library.core.exceptions import NotFoundError
from college_library.database import close_db, create_session_factory, init_db
from college_library.models.book import Book
from college_library.models.book_issue import BookIssue, IssueStatus
from college_library.schemas.book import BookRead
from college_library.schemas.book_issue import IssueRead


class SqlBookRepository:
    """Book repository bound to a session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _row(self, book_id: int, for_update: bool = False) -> Book:
        query = select(Book).where(Book.id == book_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        book = result.scalar_one_or_none()
        if not book:
            raise NotFoundError("Book", book_id)
        return book

    async def create(self, data: dict[str, Any]) -> BookRead:
        book = Book(**data)
        self.session.add(book)
        await self.session.flush()
        await self.session.refresh(book)
        return BookRead.model_validate(book)

    async def get(self, book_id: int, for_update: bool = False) -> BookRead:
        return BookRead.model_validate(await self._row(book_id, for_update))

    async def find_by_isbn(self, isbn: str) -> Optional[BookRead]:
        result = await self.session.execute(select(Book).where(Book.isbn == isbn))
        book = result.scalar_one_or_none()
        return BookRead.model_validate(book) if book else None

    async def update(self, book_id: int, data: dict[str, Any]) -> BookRead:
        book = await self._row(book_id)
        for field, value in data.items():
            setattr(book, field, value)
        await self.session.flush()
        await self.session.refresh(book)
        return BookRead.model_validate(book)

    async def delete(self, book_id: int) -> None:
        book = await self._row(book_id)
        await self.session.delete(book)
        await self.session.flush()

    async def list(self) -> list[BookRead]:
        result = await self.session.execute(select(Book).order_by(Book.id))
        return [BookRead.model_validate(b) for b in result.scalars().all()]


class SqlIssueRepository:
    """Issue repository bound to a session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _row(self, issue_id: int) -> BookIssue:
        result = await self.session.execute(
            select(BookIssue).where(BookIssue.id == issue_id)
        )
        issue = result.scalar_one_or_none()
        if not issue:
            raise NotFoundError("Book issue", issue_id)
        return issue

    async def create(self, data: dict[str, Any]) -> IssueRead:
        issue = BookIssue(**data)
        self.session.add(issue)
        await self.session.flush()
        await self.session.refresh(issue)
        return IssueRead.model_validate(issue)

    async def get(self, issue_id: int) -> IssueRead:
        return IssueRead.model_validate(await self._row(issue_id))

    async def update(self, issue_id: int, data: dict[str, Any]) -> IssueRead:
        issue = await self._row(issue_id)
        for field, value in data.items():
            setattr(issue, field, value)
        await self.session.flush()
        await self.session.refresh(issue)
        return IssueRead.model_validate(issue)

    async def delete(self, issue_id: int) -> None:
        issue = await self._row(issue_id)
        await self.session.delete(issue)
        await self.session.flush()

    async def list(
        self,
        student_id: Optional[int] = None,
        book_id: Optional[int] = None,
        status: Optional[IssueStatus] = None,
    ) -> list[IssueRead]:
        query = select(BookIssue)
        if student_id is not None:
            query = query.where(BookIssue.student_id == student_id)
        if book_id is not None:
            query = query.where(BookIssue.book_id == book_id)
        if status is not None:
            query = query.where(BookIssue.status == status)
        result = await self.session.execute(query.order_by(BookIssue.id))
        return [IssueRead.model_validate(i) for i in result.scalars().all()]


class SqlUnitOfWork:
    """Both repositories sharing one session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.books = SqlBookRepository(session)
        self.issues = SqlIssueRepository(session)


class SqlStorage:
    """Storage where each unit of work is one database transaction."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self.engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    async def create_tables(self) -> None:
        await init_db(self.engine)

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[SqlUnitOfWork]:
        async with self._session_factory() as session:
            async with session.begin():
                yield SqlUnitOfWork(session)

    async def close(self) -> None:
        await close_db(self.engine)
