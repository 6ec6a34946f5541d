"""
API models and schemas for the FastAPI application.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from books_api.errors import ValidationError

REQUIRED_BOOK_FIELDS = ("Name", "Author", "Publisher")

# Any JSON scalar is accepted and bound as given; only presence is checked
BookFieldValue = Union[str, int, float, bool]


class Book(BaseModel):
    """A row of the books table."""
    id: int = Field(..., description="Database-generated identifier")
    Name: Optional[BookFieldValue] = Field(None, description="Book title")
    Author: Optional[BookFieldValue] = Field(None, description="Book author")
    Publisher: Optional[BookFieldValue] = Field(None, description="Book publisher")


class BookPayload(BaseModel):
    """
    Request body for create and update.
    Fields are optional at parse time; require_fields() enforces presence.
    """
    Name: Optional[BookFieldValue] = Field(None, description="Book title")
    Author: Optional[BookFieldValue] = Field(None, description="Book author")
    Publisher: Optional[BookFieldValue] = Field(None, description="Book publisher")

    def missing_fields(self) -> list:
        """Names of required fields that are absent, null or empty."""
        return [name for name in REQUIRED_BOOK_FIELDS if not getattr(self, name)]

    def require_fields(self, message: Optional[str] = None) -> "BookPayload":
        """
        Validate that every required field is present and non-empty.

        Raises:
            ValidationError: Listing each missing field
        """
        missing = self.missing_fields()
        if missing:
            raise ValidationError(missing, message)
        return self


class BookCreatedResponse(BaseModel):
    """Response for a created book: the input fields plus the generated id."""
    message: str = Field(..., description="Confirmation message")
    id: int = Field(..., description="Generated book identifier")
    Name: BookFieldValue
    Author: BookFieldValue
    Publisher: BookFieldValue


class BookUpdatedResponse(BaseModel):
    """Response for an updated book: echo of the values that were written."""
    message: str = Field(..., description="Confirmation message")
    id: str = Field(..., description="Identifier as given in the request path")
    Name: BookFieldValue
    Author: BookFieldValue
    Publisher: BookFieldValue


class MessageResponse(BaseModel):
    """Plain confirmation response."""
    message: str = Field(..., description="Confirmation message")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")
