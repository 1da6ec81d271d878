"""Catalog service owning book records and their copy counts."""
from datetime import date
from typing import Any, Callable, Optional, Union

import pydantic

from college_library.core.exceptions import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from college_library.core.logging import get_logger
from college_library.models.book import Availability
from college_library.schemas.book import BookCreate, BookRead, BookUpdate
from college_library.storage.base import Storage, UnitOfWork

logger = get_logger("services.catalog")


def validate_payload(schema: type[pydantic.BaseModel], data: Any) -> Any:
    """Coerce a raw mapping into a schema, raising the app validation error."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"]) or None
        message = f"{field}: {error['msg']}" if field else error["msg"]
        raise ValidationError(message, field=field) from exc


async def apply_adjustment(uow: UnitOfWork, book_id: int, delta: int) -> BookRead:
    """Move a book's available copies by ``delta`` inside an open unit of work."""
    book = await uow.books.get(book_id, for_update=True)
    available = book.available_copies + delta
    if available < 0 or available > book.total_copies:
        raise InvalidStateError(
            f"Invalid copy count: book {book_id} would have {available} of "
            f"{book.total_copies} copies available",
            details={
                "book_id": book_id,
                "available_copies": book.available_copies,
                "total_copies": book.total_copies,
                "delta": delta,
            },
        )
    return await uow.books.update(book_id, {"available_copies": available})


class CatalogService:
    """Service for catalog operations."""

    def __init__(self, storage: Storage, clock: Callable[[], date] = date.today):
        self.storage = storage
        self.clock = clock

    async def list_books(
        self,
        search: Optional[str] = None,
        genre: Optional[str] = None,
        availability: Union[Availability, str] = Availability.ALL,
    ) -> list[BookRead]:
        """List books, optionally filtered by search text, genre and availability.

        Search text matches title and author case-insensitively and ISBN
        verbatim. ``availability`` is ``all``, ``available`` (copies on the
        shelf) or ``unavailable`` (every copy out).
        """
        try:
            availability = Availability(availability)
        except ValueError:
            raise ValidationError(
                f"Unknown availability filter: {availability}", field="availability"
            )

        async with self.storage.unit_of_work() as uow:
            books = await uow.books.list()

        if search:
            needle = search.lower()
            books = [
                b for b in books
                if needle in b.title.lower()
                or needle in b.author.lower()
                or search in b.isbn
            ]
        if genre:
            books = [b for b in books if b.genre == genre]
        if availability == Availability.AVAILABLE:
            books = [b for b in books if b.available_copies > 0]
        elif availability == Availability.UNAVAILABLE:
            books = [b for b in books if b.available_copies == 0]
        return books

    async def list_genres(self) -> list[str]:
        """Distinct genres in the catalog."""
        async with self.storage.unit_of_work() as uow:
            books = await uow.books.list()
        return sorted({b.genre for b in books if b.genre})

    async def get_book(self, book_id: int) -> BookRead:
        async with self.storage.unit_of_work() as uow:
            return await uow.books.get(book_id)

    async def create_book(self, book_data: Union[BookCreate, dict]) -> BookRead:
        """Add a book with every copy available."""
        book_data = validate_payload(BookCreate, book_data)

        async with self.storage.unit_of_work() as uow:
            if await uow.books.find_by_isbn(book_data.isbn):
                raise ValidationError(
                    f"A book with ISBN {book_data.isbn} already exists", field="isbn"
                )
            obj = book_data.model_dump()
            obj["available_copies"] = book_data.total_copies
            obj["date_added"] = self.clock()
            book = await uow.books.create(obj)

        logger.info(f"Added book {book.id} ({book.title}) with {book.total_copies} copies")
        return book

    async def update_book(
        self,
        book_id: int,
        book_data: Union[BookUpdate, dict],
    ) -> BookRead:
        """Patch a book.

        A change of ``total_copies`` moves ``available_copies`` by the same
        delta, floored at zero and capped at the new total.
        """
        book_data = validate_payload(BookUpdate, book_data)
        update_data = book_data.model_dump(exclude_unset=True)

        async with self.storage.unit_of_work() as uow:
            book = await uow.books.get(book_id, for_update=True)

            isbn = update_data.get("isbn")
            if isbn is not None:
                existing = await uow.books.find_by_isbn(isbn)
                if existing and existing.id != book_id:
                    raise ValidationError(
                        f"A book with ISBN {isbn} already exists", field="isbn"
                    )

            for field in ("title", "author", "isbn", "genre", "publication_year", "total_copies"):
                if field in update_data and update_data[field] is None:
                    raise ValidationError(f"{field} is required", field=field)

            total = update_data.get("total_copies")
            if total is not None and total != book.total_copies:
                available = book.available_copies + (total - book.total_copies)
                update_data["available_copies"] = min(max(available, 0), total)

            if not update_data:
                return book
            book = await uow.books.update(book_id, update_data)

        logger.info(f"Updated book {book_id}: {sorted(update_data)}")
        return book

    async def delete_book(self, book_id: int) -> None:
        """Remove a book. Outstanding issues are the caller's to reconcile."""
        async with self.storage.unit_of_work() as uow:
            await uow.books.delete(book_id)
        logger.info(f"Deleted book {book_id}")

    async def adjust_availability(self, book_id: int, delta: int) -> BookRead:
        """Apply a copy-count delta, keeping it within [0, total_copies]."""
        try:
            async with self.storage.unit_of_work() as uow:
                book = await apply_adjustment(uow, book_id, delta)
        except (InvalidStateError, NotFoundError) as exc:
            logger.warning(f"Availability adjustment rejected: {exc.message}")
            raise
        logger.info(
            f"Book {book_id} availability {delta:+d} -> "
            f"{book.available_copies}/{book.total_copies}"
        )
        return book
