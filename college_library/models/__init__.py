"""SQLAlchemy models."""
from college_library.models.book import Availability, Book
from college_library.models.book_issue import BookIssue, DisplayStatus, IssueStatus

__all__ = [
    # Catalog
    "Book",
    "Availability",
    # Ledger
    "BookIssue",
    "IssueStatus",
    "DisplayStatus",
]
