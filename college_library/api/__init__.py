"""API routes."""
from fastapi import APIRouter

from college_library.api.books import router as books_router
from college_library.api.issues import router as issues_router
from college_library.api.students import router as students_router

# Create main API router
api_router = APIRouter(prefix="/api/v1")

# Include all route modules
api_router.include_router(books_router)
api_router.include_router(issues_router)
api_router.include_router(students_router)

__all__ = ["api_router"]
