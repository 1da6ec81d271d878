"""
College library CLI - catalog and checkout ledger from the terminal.

Usage:
    college-library books --search algorithms
    college-library issue 3 42 --due 2024-05-01
    college-library return 7
    college-library overdue
"""
import argparse
import asyncio
import sys
from datetime import date
from typing import Optional

# Load environment variables
from dotenv import load_dotenv
load_dotenv()

from college_library.config import get_settings  # noqa: E402
from college_library.core.exceptions import AppException  # noqa: E402
from college_library.core.logging import setup_logging  # noqa: E402
from college_library.schemas.book import BookRead  # noqa: E402
from college_library.schemas.book_issue import IssueRead  # noqa: E402
from college_library.services.catalog_service import CatalogService  # noqa: E402
from college_library.services.ledger_service import LedgerService  # noqa: E402
from college_library.storage import build_storage  # noqa: E402


# ============================================================================
# COLORS AND FORMATTING
# ============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'


def print_header(text: str):
    """Print a header."""
    print(f"\n{Colors.BOLD}{Colors.HEADER}{'='*70}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.HEADER}  {text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.HEADER}{'='*70}{Colors.END}\n")


def print_success(text: str):
    """Print success message."""
    print(f"{Colors.GREEN}✓ {text}{Colors.END}")


def print_error(text: str):
    """Print error message."""
    print(f"{Colors.RED}✗ {text}{Colors.END}")


def print_warning(text: str):
    """Print warning message."""
    print(f"{Colors.YELLOW}⚠ {text}{Colors.END}")


def format_book(book: BookRead) -> str:
    color = Colors.GREEN if book.available_copies > 0 else Colors.RED
    return (
        f"{book.id:>4}  {book.title[:40]:<40}  {book.author[:24]:<24}  "
        f"{book.isbn:<16}  {color}{book.available_copies}/{book.total_copies}{Colors.END}"
    )


def format_issue(issue: IssueRead, ledger: LedgerService) -> str:
    status = ledger.display_status(issue).value
    color = {
        "issued": Colors.BLUE,
        "returned": Colors.GREEN,
        "overdue": Colors.RED,
    }[status]
    returned = issue.return_date.isoformat() if issue.return_date else "-"
    return (
        f"{issue.id:>4}  book {issue.book_id:>4}  student {issue.student_id:>5}  "
        f"issued {issue.issue_date.isoformat()}  due {issue.due_date.isoformat()}  "
        f"returned {returned:<10}  {color}{status}{Colors.END}"
    )


# ============================================================================
# COMMANDS
# ============================================================================

async def run_command(args: argparse.Namespace) -> None:
    """Build the configured storage and dispatch one command."""
    settings = get_settings()
    storage = await build_storage(settings)
    catalog = CatalogService(storage)
    ledger = LedgerService(storage, loan_days=settings.default_loan_days)

    if args.command in ("issue", "return", "delete-issue") and settings.storage_backend == "memory":
        print_warning("In-memory storage: changes are discarded when the command exits")

    try:
        if args.command == "init-db":
            print_success(f"Storage ready ({settings.storage_backend})")

        elif args.command == "books":
            books = await catalog.list_books(
                search=args.search, genre=args.genre, availability=args.availability
            )
            print_header(f"Catalog ({len(books)} books)")
            for book in books:
                print(format_book(book))

        elif args.command == "issues":
            issues = await ledger.list_issues(
                status=args.status, student_id=args.student, search=args.search
            )
            print_header(f"Book issues ({len(issues)})")
            for issue in issues:
                print(format_issue(issue, ledger))

        elif args.command == "overdue":
            issues = await ledger.list_overdue(as_of=args.as_of)
            print_header(f"Overdue books ({len(issues)})")
            for issue in issues:
                print(format_issue(issue, ledger))

        elif args.command == "issue":
            issue = await ledger.issue_book(args.book_id, args.student_id, args.due)
            print_success(
                f"Issued book {issue.book_id} to student {issue.student_id}, "
                f"due {issue.due_date.isoformat()} (issue {issue.id})"
            )

        elif args.command == "return":
            issue = await ledger.return_book(args.issue_id)
            print_success(f"Returned issue {issue.id} on {issue.return_date.isoformat()}")

        elif args.command == "delete-issue":
            await ledger.delete_issue(args.issue_id)
            print_success(f"Deleted issue {args.issue_id}")
    finally:
        await storage.close()


# ============================================================================
# MAIN
# ============================================================================

def iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date (YYYY-MM-DD): {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="college-library",
        description="College library CLI - manage the catalog and book issues",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  college-library books -a available           # Books with copies on the shelf
  college-library issues --status overdue      # Overdue issue records
  college-library issue 3 42                   # Issue book 3 to student 42
  college-library return 7                     # Return issue 7
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create storage (tables for SQL)")

    books = subparsers.add_parser("books", help="List the catalog")
    books.add_argument("-s", "--search", help="Match title, author or ISBN")
    books.add_argument("-g", "--genre", help="Only this genre")
    books.add_argument(
        "-a", "--availability",
        choices=["all", "available", "unavailable"],
        default="all",
        help="Copies on the shelf (available) or all out (unavailable)",
    )

    issues = subparsers.add_parser("issues", help="List issue records")
    issues.add_argument("--status", choices=["issued", "returned", "overdue"])
    issues.add_argument("--student", type=int, help="Only this student's records")
    issues.add_argument("-s", "--search", help="Match the book title or ISBN")

    overdue = subparsers.add_parser("overdue", help="List overdue issue records")
    overdue.add_argument("--as-of", type=iso_date, help="Reference date (default: today)")

    issue = subparsers.add_parser("issue", help="Issue a book to a student")
    issue.add_argument("book_id", type=int)
    issue.add_argument("student_id", type=int)
    issue.add_argument("--due", type=iso_date, help="Due date (default: loan period from today)")

    ret = subparsers.add_parser("return", help="Return an issued book")
    ret.add_argument("issue_id", type=int)

    delete = subparsers.add_parser("delete-issue", help="Delete an issue record")
    delete.add_argument("issue_id", type=int)

    return parser


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging("WARNING")

    try:
        asyncio.run(run_command(args))
    except AppException as e:
        print_error(e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        print(f"\n\n{Colors.YELLOW}Interrupted by user{Colors.END}")
        sys.exit(1)


if __name__ == "__main__":
    main()
