"""API tests."""
from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from college_library.api.deps import get_storage
from college_library.main import app
from college_library.storage.memory import MemoryStorage

BOOK = {
    "title": "Operating System Concepts",
    "author": "Abraham Silberschatz",
    "isbn": "978-1118063330",
    "genre": "Computer Science",
    "publication_year": 2012,
    "total_copies": 2,
    "description": "Processes, memory and storage",
}


@pytest.fixture
async def client():
    """Create test client over fresh in-memory storage."""
    storage = MemoryStorage()
    app.dependency_overrides[get_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_book(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/books", json={**BOOK, **overrides})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    """Test root endpoint."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_book_crud(client: AsyncClient):
    """Test book create, read, update and delete."""
    book = await create_book(client)
    assert book["available_copies"] == 2
    assert book["date_added"] == date.today().isoformat()

    # Duplicate ISBN
    response = await client.post("/api/v1/books", json=BOOK)
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"

    # List and get
    response = await client.get("/api/v1/books")
    assert [b["id"] for b in response.json()] == [book["id"]]
    response = await client.get(f"/api/v1/books/{book['id']}")
    assert response.status_code == 200

    # Update
    response = await client.patch(f"/api/v1/books/{book['id']}", json={"total_copies": 5})
    assert response.status_code == 200
    assert response.json()["available_copies"] == 5

    # Delete
    response = await client.delete(f"/api/v1/books/{book['id']}")
    assert response.status_code == 204
    response = await client.delete(f"/api/v1/books/{book['id']}")
    assert response.status_code == 404
    response = await client.get(f"/api/v1/books/{book['id']}")
    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_book_validation(client: AsyncClient):
    """Test missing fields and non-patchable counts."""
    incomplete = {k: v for k, v in BOOK.items() if k != "genre"}
    response = await client.post("/api/v1/books", json=incomplete)
    assert response.status_code == 422

    book = await create_book(client)
    response = await client.patch(
        f"/api/v1/books/{book['id']}", json={"available_copies": 0}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_book_search_and_genres(client: AsyncClient):
    """Test catalog filters."""
    await create_book(client)
    await create_book(
        client,
        title="Principles of Physics",
        author="David Halliday",
        isbn="978-1118230749",
        genre="Physics",
    )

    response = await client.get("/api/v1/books", params={"search": "halliday"})
    assert [b["genre"] for b in response.json()] == ["Physics"]
    response = await client.get("/api/v1/books/genres")
    assert response.json() == ["Computer Science", "Physics"]


@pytest.mark.asyncio
async def test_adjust_availability(client: AsyncClient):
    """Test manual copy adjustments and their bounds."""
    book = await create_book(client)
    url = f"/api/v1/books/{book['id']}/availability"

    response = await client.post(url, json={"delta": -1})
    assert response.json()["available_copies"] == 1
    response = await client.post(url, json={"delta": 5})
    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_STATE"


@pytest.mark.asyncio
async def test_issue_return_flow(client: AsyncClient):
    """Test the issue/return workflow end to end."""
    book = await create_book(client)
    due = (date.today() + timedelta(days=14)).isoformat()

    response = await client.post(
        "/api/v1/issues", json={"book_id": book["id"], "student_id": 5, "due_date": due}
    )
    assert response.status_code == 201
    first = response.json()
    assert first["status"] == "issued"
    assert first["display_status"] == "issued"
    assert first["return_date"] is None
    assert first["issue_date"] == date.today().isoformat()

    await client.post("/api/v1/issues", json={"book_id": book["id"], "student_id": 6})
    response = await client.get(f"/api/v1/books/{book['id']}")
    assert response.json()["available_copies"] == 0

    # No copies left
    response = await client.post(
        "/api/v1/issues", json={"book_id": book["id"], "student_id": 7}
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "UNAVAILABLE"

    # Return
    response = await client.post(f"/api/v1/issues/{first['id']}/return")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "returned"
    assert data["return_date"] == date.today().isoformat()
    response = await client.get(f"/api/v1/books/{book['id']}")
    assert response.json()["available_copies"] == 1

    # Return again
    response = await client.post(f"/api/v1/issues/{first['id']}/return")
    assert response.status_code == 409
    assert response.json()["error_code"] == "ALREADY_RETURNED"


@pytest.mark.asyncio
async def test_issue_unknown_book(client: AsyncClient):
    """Test issuing a book that does not exist."""
    response = await client.post("/api/v1/issues", json={"book_id": 99, "student_id": 5})
    assert response.status_code == 409
    assert response.json()["error_code"] == "UNAVAILABLE"


@pytest.mark.asyncio
async def test_overdue_listing(client: AsyncClient):
    """Test overdue is reported without being stored."""
    book = await create_book(client)
    response = await client.post(
        "/api/v1/issues",
        json={"book_id": book["id"], "student_id": 5, "due_date": "2020-01-01"},
    )
    late = response.json()
    assert late["status"] == "issued"
    assert late["display_status"] == "overdue"
    assert late["is_overdue"] is True

    await client.post("/api/v1/issues", json={"book_id": book["id"], "student_id": 6})

    response = await client.get("/api/v1/issues/overdue")
    assert [i["id"] for i in response.json()] == [late["id"]]
    response = await client.get("/api/v1/issues", params={"status": "overdue"})
    assert [i["id"] for i in response.json()] == [late["id"]]
    response = await client.get("/api/v1/issues", params={"status": "issued"})
    assert len(response.json()) == 2
    response = await client.get("/api/v1/issues/overdue", params={"as_of": "2019-12-31"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_student_issues_and_delete(client: AsyncClient):
    """Test deleting an outstanding issue restores the copy."""
    book = await create_book(client)
    response = await client.post(
        "/api/v1/issues", json={"book_id": book["id"], "student_id": 5}
    )
    issue = response.json()

    response = await client.get("/api/v1/students/5/issues")
    assert [i["id"] for i in response.json()] == [issue["id"]]

    response = await client.delete(f"/api/v1/issues/{issue['id']}")
    assert response.status_code == 204
    response = await client.get("/api/v1/students/5/issues")
    assert response.json() == []
    response = await client.get(f"/api/v1/books/{book['id']}")
    assert response.json()["available_copies"] == 2
    response = await client.get(f"/api/v1/issues/{issue['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reschedule_issue(client: AsyncClient):
    """Test moving the due date of an outstanding issue."""
    book = await create_book(client)
    response = await client.post(
        "/api/v1/issues", json={"book_id": book["id"], "student_id": 5}
    )
    issue = response.json()

    response = await client.patch(
        f"/api/v1/issues/{issue['id']}", json={"due_date": "2031-01-01"}
    )
    assert response.status_code == 200
    assert response.json()["due_date"] == "2031-01-01"

    response = await client.patch(
        f"/api/v1/issues/{issue['id']}", json={"status": "returned"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_availability_filter_and_issue_search(client: AsyncClient):
    """Test the catalog availability filter and the ledger search."""
    book = await create_book(client, total_copies=1)
    other = await create_book(
        client, title="Principles of Physics", isbn="978-1118230749", genre="Physics"
    )
    await client.post("/api/v1/issues", json={"book_id": book["id"], "student_id": 5})

    response = await client.get("/api/v1/books", params={"availability": "unavailable"})
    assert [b["id"] for b in response.json()] == [book["id"]]
    response = await client.get("/api/v1/books", params={"availability": "available"})
    assert [b["id"] for b in response.json()] == [other["id"]]
    response = await client.get("/api/v1/books", params={"availability": "lost"})
    assert response.status_code == 422

    response = await client.get("/api/v1/issues", params={"search": "operating"})
    assert [i["book_id"] for i in response.json()] == [book["id"]]
    response = await client.get("/api/v1/issues", params={"search": "physics"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    """Test unknown paths get the framework's 404."""
    response = await client.get("/api/v1/shelves")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
