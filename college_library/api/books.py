"""Catalog API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from college_library.api.deps import get_catalog_service
from college_library.models.book import Availability
from college_library.schemas.book import (
    AvailabilityAdjust,
    BookCreate,
    BookRead,
    BookUpdate,
)
from college_library.schemas.common import ErrorResponse
from college_library.services.catalog_service import CatalogService

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


@router.get("", response_model=list[BookRead])
async def list_books(
    search: Optional[str] = Query(None, description="Matches title, author or ISBN"),
    genre: Optional[str] = None,
    availability: Availability = Availability.ALL,
    service: CatalogService = Depends(get_catalog_service),
) -> list[BookRead]:
    """List the catalog."""
    return await service.list_books(
        search=search, genre=genre, availability=availability
    )


@router.get("/genres", response_model=list[str])
async def list_genres(
    service: CatalogService = Depends(get_catalog_service),
) -> list[str]:
    """Distinct genres in the catalog."""
    return await service.list_genres()


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> BookRead:
    """Add a book; every copy starts available."""
    return await service.create_book(book_data)


@router.get("/{book_id}", response_model=BookRead)
async def get_book(
    book_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> BookRead:
    """Get a book by id."""
    return await service.get_book(book_id)


@router.patch("/{book_id}", response_model=BookRead)
async def update_book(
    book_id: int,
    book_data: BookUpdate,
    service: CatalogService = Depends(get_catalog_service),
) -> BookRead:
    """Update a book."""
    return await service.update_book(book_id, book_data)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> None:
    """Delete a book."""
    await service.delete_book(book_id)


@router.post("/{book_id}/availability", response_model=BookRead)
async def adjust_availability(
    book_id: int,
    adjustment: AvailabilityAdjust,
    service: CatalogService = Depends(get_catalog_service),
) -> BookRead:
    """Manually move a book's available copy count."""
    return await service.adjust_availability(book_id, adjustment.delta)
