"""
Error taxonomy for the Books API.

Startup errors (configuration, connection) are fatal. Request errors
(validation, not found, query) are translated into HTTP responses by the router.
"""

from typing import List, Optional


class BooksAPIError(Exception):
    """Base class for all service errors."""


class ConfigurationError(BooksAPIError):
    """A required configuration value is absent or invalid."""


class DatabaseConnectionError(BooksAPIError):
    """The database could not be reached or rejected the credentials."""


class ValidationError(BooksAPIError):
    """Required request body fields are missing or empty."""

    def __init__(self, missing_fields: List[str], message: Optional[str] = None):
        self.missing_fields = missing_fields
        super().__init__(message or f"Missing required fields: {', '.join(missing_fields)}")


class NotFoundError(BooksAPIError):
    """No row matched the requested key or name."""


class QueryError(BooksAPIError):
    """A statement failed at the database layer."""
