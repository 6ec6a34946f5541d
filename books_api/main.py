"""
FastAPI main application for the Books API.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from books_api.config import config as api_config
from books_api.errors import ConfigurationError, DatabaseConnectionError
from books_api.models import ErrorResponse
from books_api.routes import router as books_router
from utilities.config import load_database_config
from utilities.database import DatabaseConnector
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)


def create_app(connector: Optional[DatabaseConnector] = None, configure_logging: bool = True) -> FastAPI:
    """
    Build the application.

    Args:
        connector: Connector to use instead of one built from the DB_* environment
        configure_logging: Install the structlog setup from the API configuration

    Returns:
        Configured FastAPI application
    """
    if configure_logging:
        setup_logging(
            log_level=api_config.log_level,
            log_format=api_config.log_format,
            log_file=api_config.log_file,
            debug=api_config.debug
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the shared database connection for the lifetime of the server."""
        logger.info("Starting Books API")

        db_connector = connector
        try:
            if db_connector is None:
                db_config = load_database_config()
                logger.info("Database configuration loaded", **db_config.describe())
                db_connector = DatabaseConnector(db_config.get_url())
            await db_connector.connect()
        except (ConfigurationError, DatabaseConnectionError) as e:
            logger.error("Failed to start Books API", error=str(e), error_type=type(e).__name__)
            raise

        app.state.db_connector = db_connector
        logger.info("Database connection established")
        logger.info("Server running", url=api_config.get_base_url())

        yield

        logger.info("Shutting down Books API")
        app.state.db_connector = None
        await db_connector.disconnect()

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )

    app.include_router(books_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                status_code=exc.status_code
            ).model_dump(),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc: RequestValidationError):
        """Malformed or mistyped request bodies are client errors."""
        logger.info("Rejected malformed request", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error="Invalid request body",
                detail="; ".join(
                    f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
                    for err in exc.errors()
                ),
                status_code=status.HTTP_400_BAD_REQUEST
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if api_config.debug else None,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            ).model_dump()
        )

    return app


# Create FastAPI application
app = create_app()

