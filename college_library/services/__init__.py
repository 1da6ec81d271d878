"""Business logic services."""
from college_library.services.catalog_service import CatalogService, apply_adjustment
from college_library.services.ledger_service import (
    LedgerService,
    display_status,
    is_overdue,
)

__all__ = [
    "CatalogService",
    "LedgerService",
    "apply_adjustment",
    "display_status",
    "is_overdue",
]
