"""Catalog service tests."""
import pytest

from college_library.core.exceptions import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from college_library.schemas.book import BookCreate

from tests.conftest import TODAY, book_payload


@pytest.mark.asyncio
async def test_create_book_starts_with_every_copy_available(catalog):
    """Test a new book gets available copies, date and an id."""
    book = await catalog.create_book(book_payload(total_copies=4))

    assert book.id == 1
    assert book.total_copies == 4
    assert book.available_copies == 4
    assert book.date_added == TODAY


@pytest.mark.asyncio
async def test_create_book_accepts_schema(catalog):
    """Test the service takes a validated schema as well as a mapping."""
    book = await catalog.create_book(BookCreate(**book_payload()))
    assert book.title == "Introduction to Algorithms"


@pytest.mark.asyncio
async def test_create_book_ids_increase(catalog):
    """Test ids grow past the current maximum."""
    first = await catalog.create_book(book_payload(isbn="111"))
    second = await catalog.create_book(book_payload(isbn="222"))
    assert second.id > first.id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field",
    ["title", "author", "isbn", "genre", "publication_year", "total_copies"],
)
async def test_create_book_requires_fields(catalog, field):
    """Test each required field is enforced."""
    payload = book_payload()
    del payload[field]

    with pytest.raises(ValidationError) as exc_info:
        await catalog.create_book(payload)
    assert exc_info.value.details["field"] == field
    assert await catalog.list_books() == []


@pytest.mark.asyncio
async def test_create_book_rejects_blank_title(catalog):
    """Test whitespace-only strings count as missing."""
    with pytest.raises(ValidationError):
        await catalog.create_book(book_payload(title="   "))


@pytest.mark.asyncio
async def test_create_book_rejects_duplicate_isbn(catalog, book):
    """Test ISBN uniqueness, ignoring surrounding whitespace."""
    with pytest.raises(ValidationError) as exc_info:
        await catalog.create_book(book_payload(isbn=f"  {book.isbn} ", title="Copy"))
    assert exc_info.value.details["field"] == "isbn"
    assert len(await catalog.list_books()) == 1


@pytest.mark.asyncio
async def test_update_unknown_book(catalog):
    """Test updating a missing book."""
    with pytest.raises(NotFoundError):
        await catalog.update_book(99, {"title": "Nope"})


@pytest.mark.asyncio
async def test_update_book_fields(catalog, book):
    """Test a plain field patch."""
    updated = await catalog.update_book(book.id, {"title": "CLRS", "isbn": book.isbn})
    assert updated.title == "CLRS"
    assert updated.available_copies == book.available_copies


@pytest.mark.asyncio
async def test_update_book_rejects_isbn_collision(catalog, book):
    """Test an ISBN already used by another book is refused."""
    other = await catalog.create_book(book_payload(isbn="978-1118063330", title="OS"))

    with pytest.raises(ValidationError):
        await catalog.update_book(other.id, {"isbn": book.isbn})
    assert (await catalog.get_book(other.id)).isbn == "978-1118063330"


@pytest.mark.asyncio
async def test_update_book_rejects_available_copies(catalog, book):
    """Test available copies are not directly patchable."""
    with pytest.raises(ValidationError):
        await catalog.update_book(book.id, {"available_copies": 0})


@pytest.mark.asyncio
async def test_update_total_copies_moves_available(catalog):
    """Test a total change shifts available copies by the same delta."""
    book = await catalog.create_book(book_payload(total_copies=5))
    await catalog.adjust_availability(book.id, -3)

    grown = await catalog.update_book(book.id, {"total_copies": 7})
    assert grown.available_copies == 4

    shrunk = await catalog.update_book(book.id, {"total_copies": 4})
    assert shrunk.available_copies == 1


@pytest.mark.asyncio
async def test_update_total_copies_floors_at_zero(catalog):
    """Test shrinking below the issued count leaves no copies, never negative."""
    book = await catalog.create_book(book_payload(total_copies=5))
    await catalog.adjust_availability(book.id, -4)

    updated = await catalog.update_book(book.id, {"total_copies": 2})
    assert updated.total_copies == 2
    assert updated.available_copies == 0


@pytest.mark.asyncio
async def test_delete_book(catalog, book):
    """Test deletion and deleting twice."""
    await catalog.delete_book(book.id)

    with pytest.raises(NotFoundError):
        await catalog.get_book(book.id)
    with pytest.raises(NotFoundError):
        await catalog.delete_book(book.id)


@pytest.mark.asyncio
async def test_adjust_availability(catalog, book):
    """Test deltas within range apply."""
    book = await catalog.adjust_availability(book.id, -2)
    assert book.available_copies == 0
    book = await catalog.adjust_availability(book.id, 1)
    assert book.available_copies == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("delta", [-3, 1])
async def test_adjust_availability_out_of_range(catalog, book, delta):
    """Test the count never leaves [0, total_copies]."""
    with pytest.raises(InvalidStateError):
        await catalog.adjust_availability(book.id, delta)
    assert (await catalog.get_book(book.id)).available_copies == 2


@pytest.mark.asyncio
async def test_adjust_availability_unknown_book(catalog):
    """Test adjusting a missing book."""
    with pytest.raises(NotFoundError):
        await catalog.adjust_availability(42, -1)


@pytest.mark.asyncio
async def test_list_books_filters(catalog):
    """Test search, genre and availability filters."""
    algorithms = await catalog.create_book(book_payload(isbn="111", total_copies=1))
    physics = await catalog.create_book(
        book_payload(
            title="Principles of Physics",
            author="David Halliday",
            isbn="978-1118230749",
            genre="Physics",
        )
    )
    await catalog.adjust_availability(algorithms.id, -1)

    assert [b.id for b in await catalog.list_books(search="HALLIDAY")] == [physics.id]
    assert [b.id for b in await catalog.list_books(search="algorithms")] == [algorithms.id]
    assert [b.id for b in await catalog.list_books(search="1118")] == [physics.id]
    assert [b.id for b in await catalog.list_books(genre="Physics")] == [physics.id]
    assert [b.id for b in await catalog.list_books(availability="available")] == [physics.id]
    assert [b.id for b in await catalog.list_books(availability="unavailable")] == [algorithms.id]
    assert len(await catalog.list_books(availability="all")) == 2
    with pytest.raises(ValidationError):
        await catalog.list_books(availability="lost")
    assert len(await catalog.list_books()) == 2


@pytest.mark.asyncio
async def test_list_genres(catalog):
    """Test distinct sorted genres."""
    await catalog.create_book(book_payload(isbn="1", genre="Physics"))
    await catalog.create_book(book_payload(isbn="2", genre="Mathematics"))
    await catalog.create_book(book_payload(isbn="3", genre="Physics"))

    assert await catalog.list_genres() == ["Mathematics", "Physics"]
