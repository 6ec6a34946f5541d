"""
FastAPI REST API for the books table.

This package provides:
- Listing, fetching and partial-name search of books
- Creating, updating and deleting books
- Uniform JSON error responses (400, 404, 500)
"""
