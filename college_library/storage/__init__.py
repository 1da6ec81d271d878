"""Storage backends for the catalog and the checkout ledger."""
from college_library.config import Settings
from college_library.core.logging import get_logger
from college_library.database import create_engine
from college_library.storage.base import (
    BookRepository,
    IssueRepository,
    Storage,
    UnitOfWork,
)
from college_library.storage.fixtures import seed_storage
from college_library.storage.memory import MemoryStorage
from college_library.storage.sql import SqlStorage

logger = get_logger("storage")


async def build_storage(settings: Settings) -> Storage:
    """Create the storage backend selected by the settings."""
    if settings.storage_backend == "sql":
        storage = SqlStorage(create_engine(settings.database_url, echo=settings.debug))
        await storage.create_tables()
        logger.info("Using SQL storage")
        return storage

    storage = MemoryStorage()
    if settings.seed_fixtures:
        await seed_storage(storage)
    logger.info("Using in-memory storage")
    return storage


__all__ = [
    "BookRepository",
    "IssueRepository",
    "Storage",
    "UnitOfWork",
    "MemoryStorage",
    "SqlStorage",
    "build_storage",
    "seed_storage",
]
