"""Book model."""
from datetime import date
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from college_library.database import Base


class Availability(str, PyEnum):
    """Catalog filter on whether copies are on the shelf."""
    ALL = "all"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class Book(Base):
    """Catalog entry with its copy counts."""

    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_books_available_copies_range",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    isbn: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)
    publication_year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date_added: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Book(id={self.id}, title={self.title}, "
            f"available={self.available_copies}/{self.total_copies})>"
        )
