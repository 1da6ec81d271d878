"""Dependency providers for the API routes."""
from fastapi import Depends, Request

from college_library.config import settings
from college_library.services.catalog_service import CatalogService
from college_library.services.ledger_service import LedgerService
from college_library.storage.base import Storage


def get_storage(request: Request) -> Storage:
    """Storage built by the application lifespan."""
    return request.app.state.storage


def get_catalog_service(storage: Storage = Depends(get_storage)) -> CatalogService:
    """
    Dependency provider for CatalogService.
    """
    return CatalogService(storage)


def get_ledger_service(storage: Storage = Depends(get_storage)) -> LedgerService:
    """
    Dependency provider for LedgerService.
    """
    return LedgerService(storage, loan_days=settings.default_loan_days)
