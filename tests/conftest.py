"""
Pytest configuration and shared fixtures.
"""

import sqlite3
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from books_api.database import BookDatabaseService
from books_api.main import create_app
from books_api.routes import get_db_service
from utilities.database import DatabaseConnector

BOOKS_TABLE_DDL = """
    CREATE TABLE books (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        Name TEXT NOT NULL,
        Author TEXT NOT NULL,
        Publisher TEXT NOT NULL
    )
"""

DB_ENV_VARS = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_DRIVER")


@pytest.fixture
def sqlite_db_path(tmp_path):
    """Create an SQLite database file holding an empty books table."""
    db_path = tmp_path / "books.db"
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(BOOKS_TABLE_DDL)
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def sqlite_url(sqlite_db_path):
    """SQLAlchemy URL for the test database."""
    return f"sqlite+aiosqlite:///{sqlite_db_path}"


@pytest.fixture
def book_rows(sqlite_db_path):
    """Read the books table directly, bypassing the service."""
    def _rows():
        conn = sqlite3.connect(sqlite_db_path)
        try:
            return conn.execute(
                "SELECT id, Name, Author, Publisher FROM books ORDER BY id"
            ).fetchall()
        finally:
            conn.close()
    return _rows


@pytest.fixture
def client(sqlite_url):
    """Test client running the full application over SQLite."""
    app = create_app(DatabaseConnector(sqlite_url))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_db_service():
    """Create a mock book database service."""
    return AsyncMock(spec=BookDatabaseService)


@pytest.fixture
def mock_client(mock_db_service):
    """Test client whose routes use the mocked service; no database is opened."""
    app = create_app()
    app.dependency_overrides[get_db_service] = lambda: mock_db_service
    return TestClient(app)


@pytest.fixture
def clean_db_env(monkeypatch, tmp_path):
    """Remove DB_* variables and any .env file from the test's view."""
    for name in DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
