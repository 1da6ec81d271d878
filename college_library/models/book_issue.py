"""Book issue model."""
from datetime import date
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Date, Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column

from college_library.database import Base


class IssueStatus(str, PyEnum):
    """Stored issue status. Overdue is derived, never stored."""
    ISSUED = "issued"
    RETURNED = "returned"


class DisplayStatus(str, PyEnum):
    """Status shown to readers of the ledger."""
    ISSUED = "issued"
    RETURNED = "returned"
    OVERDUE = "overdue"


class BookIssue(Base):
    """Checkout ledger entry linking a book to a borrower.

    Books and borrowers are referenced by id only: deleting a book leaves
    its ledger history in place.
    """

    __tablename__ = "book_issues"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    book_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    student_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[IssueStatus] = mapped_column(
        Enum(IssueStatus), default=IssueStatus.ISSUED, nullable=False
    )
    return_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        return f"<BookIssue(id={self.id}, book_id={self.book_id}, status={self.status})>"
