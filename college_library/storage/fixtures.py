"""Bundled sample data for the in-memory backend."""
import json
from datetime import date
from importlib import resources
from typing import Any

from college_library.core.logging import get_logger
from college_library.storage.base import Storage

logger = get_logger("storage.fixtures")


def load_fixture(name: str) -> list[dict[str, Any]]:
    """Read a JSON fixture shipped with the package."""
    path = resources.files("college_library.fixtures").joinpath(f"{name}.json")
    return json.loads(path.read_text(encoding="utf-8"))


async def seed_storage(storage: Storage) -> None:
    """Load the sample catalog and ledger, keeping their ids.

    Available copies are derived from the outstanding fixture issues so the
    seeded data honours the copy-count invariant.
    """
    books = load_fixture("books")
    issues = load_fixture("book_issues")

    outstanding: dict[int, int] = {}
    for issue in issues:
        if issue["status"] == "issued":
            outstanding[issue["book_id"]] = outstanding.get(issue["book_id"], 0) + 1

    async with storage.unit_of_work() as uow:
        for book in books:
            book = dict(book)
            book["date_added"] = date.fromisoformat(book["date_added"])
            book["available_copies"] = book["total_copies"] - outstanding.get(book["id"], 0)
            await uow.books.create(book)
        for issue in issues:
            await uow.issues.create(issue)

    logger.info(f"Seeded {len(books)} books and {len(issues)} issue records")
