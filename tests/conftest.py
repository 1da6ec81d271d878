"""Shared fixtures: both storage backends and services on a fixed clock."""
from datetime import date

import pytest

from college_library.database import create_engine
from college_library.services.catalog_service import CatalogService
from college_library.services.ledger_service import LedgerService
from college_library.storage.memory import MemoryStorage
from college_library.storage.sql import SqlStorage

TODAY = date(2024, 3, 20)


def fixed_clock() -> date:
    return TODAY


def book_payload(**overrides) -> dict:
    payload = {
        "title": "Introduction to Algorithms",
        "author": "Thomas H. Cormen",
        "isbn": "978-0262033848",
        "genre": "Computer Science",
        "publication_year": 2009,
        "total_copies": 2,
        "description": "Algorithms reference",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(params=["memory", "sql"])
async def storage(request, tmp_path):
    """Each test runs against the in-memory and the SQLite backend."""
    if request.param == "memory":
        storage = MemoryStorage()
    else:
        storage = SqlStorage(create_engine(f"sqlite+aiosqlite:///{tmp_path}/library.db"))
        await storage.create_tables()
    yield storage
    await storage.close()


@pytest.fixture
def catalog(storage) -> CatalogService:
    return CatalogService(storage, clock=fixed_clock)


@pytest.fixture
def ledger(storage) -> LedgerService:
    return LedgerService(storage, clock=fixed_clock)


@pytest.fixture
async def book(catalog):
    """A book with two copies."""
    return await catalog.create_book(book_payload())
