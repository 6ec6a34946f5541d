"""
Database service layer for the FastAPI application.
Each method issues exactly one parameterized statement against the books table.
"""

from typing import List

import structlog

from books_api.errors import NotFoundError
from books_api.models import Book, BookPayload
from utilities.database import DatabaseConnector

logger = structlog.get_logger(__name__)

SELECT_ALL_BOOKS = "SELECT id, Name, Author, Publisher FROM books"
SELECT_BOOK_BY_ID = "SELECT id, Name, Author, Publisher FROM books WHERE id = :id"
SELECT_BOOKS_BY_NAME = (
    "SELECT id, Name, Author, Publisher FROM books "
    "WHERE LOWER(Name) LIKE LOWER(:pattern)"
)
INSERT_BOOK = "INSERT INTO books (Name, Author, Publisher) VALUES (:name, :author, :publisher)"
UPDATE_BOOK = "UPDATE books SET Name = :name, Author = :author, Publisher = :publisher WHERE id = :id"
DELETE_BOOK = "DELETE FROM books WHERE id = :id"


class BookDatabaseService:
    """Database service for book operations."""

    def __init__(self, connector: DatabaseConnector):
        self.connector = connector

    async def list_books(self) -> List[Book]:
        """Return every book; an empty table yields an empty list."""
        result = await self.connector.execute(SELECT_ALL_BOOKS)
        return [Book(**row) for row in result.rows]

    async def get_book_by_id(self, book_id: str) -> Book:
        """
        Get a single book by ID.

        The identifier is bound as given; a non-numeric value matches no row.

        Args:
            book_id: Book identifier from the request path

        Returns:
            The matching Book

        Raises:
            NotFoundError: If no row has this id
            QueryError: If the statement fails
        """
        result = await self.connector.execute(SELECT_BOOK_BY_ID, {"id": book_id})
        if not result.rows:
            raise NotFoundError(f"Book with ID '{book_id}' not found")
        return Book(**result.rows[0])

    async def search_books_by_name(self, name: str) -> List[Book]:
        """
        Find books whose Name contains ``name``, ignoring case.

        Raises:
            NotFoundError: If no book matches
            QueryError: If the statement fails
        """
        result = await self.connector.execute(SELECT_BOOKS_BY_NAME, {"pattern": f"%{name}%"})
        if not result.rows:
            raise NotFoundError(f"No book found with name matching '{name}'")
        return [Book(**row) for row in result.rows]

    async def create_book(self, payload: BookPayload) -> Book:
        """
        Insert a book and return it with the generated id.
        The row is not read back; the input fields are echoed.
        """
        result = await self.connector.execute(INSERT_BOOK, {
            "name": payload.Name,
            "author": payload.Author,
            "publisher": payload.Publisher,
        }, return_inserted_id=True)
        logger.info("Book created", book_id=result.inserted_id)
        return Book(
            id=result.inserted_id,
            Name=payload.Name,
            Author=payload.Author,
            Publisher=payload.Publisher,
        )

    async def update_book(self, book_id: str, payload: BookPayload) -> None:
        """
        Overwrite all three fields of a book.

        Raises:
            NotFoundError: If the statement matched no row
            QueryError: If the statement fails
        """
        result = await self.connector.execute(UPDATE_BOOK, {
            "name": payload.Name,
            "author": payload.Author,
            "publisher": payload.Publisher,
            "id": book_id,
        })
        if result.affected_count == 0:
            raise NotFoundError(f"Book with ID '{book_id}' not found")
        logger.info("Book updated", book_id=book_id)

    async def delete_book(self, book_id: str) -> int:
        """
        Delete a book by ID.

        A missing id is not an error; the affected count is returned for logging only.
        """
        result = await self.connector.execute(DELETE_BOOK, {"id": book_id})
        logger.info("Book delete executed", book_id=book_id, deleted=result.affected_count)
        return result.affected_count
