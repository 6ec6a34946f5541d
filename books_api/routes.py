"""
Book endpoints.

Every handler validates its input, issues one statement through the
database service and translates service errors into HTTP errors.
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from books_api.database import BookDatabaseService
from books_api.errors import NotFoundError, QueryError, ValidationError
from books_api.models import (
    Book, BookPayload, BookCreatedResponse, BookUpdatedResponse, MessageResponse
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])


def get_db_service(request: Request) -> BookDatabaseService:
    """Build the service around the connector opened by the application lifespan."""
    connector = getattr(request.app.state, "db_connector", None)
    if connector is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database service not available"
        )
    return BookDatabaseService(connector)


def _require_payload(payload: Optional[BookPayload], message: str) -> BookPayload:
    """Reject absent or incomplete bodies with a 400."""
    try:
        return (payload or BookPayload()).require_fields(message)
    except ValidationError as e:
        logger.info("Rejected book payload", missing_fields=e.missing_fields)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=List[Book])
async def list_books(db_service: BookDatabaseService = Depends(get_db_service)):
    """List all books."""
    try:
        return await db_service.list_books()
    except QueryError as e:
        logger.error("Failed to get books", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve books"
        )


@router.get("/name/{name}", response_model=List[Book])
async def search_books_by_name(
    name: str,
    db_service: BookDatabaseService = Depends(get_db_service)
):
    """
    Search books by partial, case-insensitive name.

    Unlike the list endpoint, an empty result is a 404.
    """
    try:
        return await db_service.search_books_by_name(name)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QueryError as e:
        logger.error("Failed to search books by name", name=name, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search books by name"
        )


@router.get("/{book_id}", response_model=Book)
async def get_book(book_id: str, db_service: BookDatabaseService = Depends(get_db_service)):
    """
    Get a single book by ID.

    - **book_id**: Book identifier; passed to the database as given
    """
    try:
        return await db_service.get_book_by_id(book_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QueryError as e:
        logger.error("Failed to get book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve book"
        )


@router.post("", response_model=BookCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    payload: Optional[BookPayload] = Body(None),
    db_service: BookDatabaseService = Depends(get_db_service)
):
    """Create a book; Name, Author and Publisher are all required."""
    payload = _require_payload(payload, "All fields (Name, Author, Publisher) are required.")
    try:
        book = await db_service.create_book(payload)
    except QueryError as e:
        logger.error("Failed to create book", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add book to the database."
        )
    return BookCreatedResponse(message="Book added successfully.", **book.model_dump())


@router.put("/{book_id}", response_model=BookUpdatedResponse)
async def update_book(
    book_id: str,
    payload: Optional[BookPayload] = Body(None),
    db_service: BookDatabaseService = Depends(get_db_service)
):
    """Overwrite Name, Author and Publisher of an existing book."""
    payload = _require_payload(payload, "Invalid data. Check Name, Author and Publisher.")
    try:
        await db_service.update_book(book_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QueryError as e:
        logger.error("Failed to update book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update book."
        )
    return BookUpdatedResponse(
        message="Book updated successfully.",
        id=book_id,
        Name=payload.Name,
        Author=payload.Author,
        Publisher=payload.Publisher,
    )


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(book_id: str, db_service: BookDatabaseService = Depends(get_db_service)):
    """Delete a book. Deleting an unknown id still reports success."""
    try:
        await db_service.delete_book(book_id)
    except QueryError as e:
        logger.error("Failed to delete book", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete book"
        )
    return MessageResponse(message="Book deleted successfully.")
