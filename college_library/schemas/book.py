"""Book Pydantic schemas."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from college_library.schemas.common import PatchSchema, RecordSchema


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class BookBase(BaseModel):
    """Base book schema."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: str = Field(..., min_length=1, max_length=32)
    genre: str = Field(..., min_length=1, max_length=100)
    publication_year: int
    total_copies: int = Field(..., ge=0)
    description: Optional[str] = None

    @field_validator("title", "author", "isbn", "genre")
    @classmethod
    def strip_required(cls, v: str) -> str:
        return _not_blank(v)


class BookCreate(BookBase):
    """Schema for adding a book to the catalog."""

    pass


class BookUpdate(PatchSchema):
    """Schema for patching a book.

    Available copies are not patchable: they move with issues and returns,
    and follow ``total_copies`` changes.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    isbn: Optional[str] = Field(None, min_length=1, max_length=32)
    genre: Optional[str] = Field(None, min_length=1, max_length=100)
    publication_year: Optional[int] = None
    total_copies: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None

    @field_validator("title", "author", "isbn", "genre")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)


class BookRead(RecordSchema):
    """Stored book record."""

    id: int
    title: str
    author: str
    isbn: str
    genre: str
    publication_year: int
    total_copies: int
    available_copies: int
    description: Optional[str] = None
    date_added: date


class AvailabilityAdjust(BaseModel):
    """Schema for a manual copy-count adjustment."""

    delta: int
