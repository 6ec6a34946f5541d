"""
Async SQL connector built on SQLAlchemy's asyncio extension.
Owns the single connection shared by every request and executes parameterized statements.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from books_api.errors import DatabaseConnectionError, QueryError

logger = structlog.get_logger(__name__)


class QueryResult(BaseModel):
    """Outcome of a single statement."""
    rows: List[Dict[str, Any]] = Field(default_factory=list, description="Rows returned by a SELECT")
    affected_count: int = Field(0, description="Rows matched by an INSERT, UPDATE or DELETE")
    inserted_id: Optional[int] = Field(None, description="Generated key reported by an INSERT")


class DatabaseConnector:
    """
    Async SQL connector.
    Holds one connection for the lifetime of the process; statements on it are serialized.
    """

    def __init__(self, url: Union[str, URL], **engine_options: Any):
        """
        Initialize the connector.

        Args:
            url: SQLAlchemy database URL (e.g. mysql+aiomysql://...)
            **engine_options: Extra keyword arguments for create_async_engine
        """
        self.url = url
        self.engine_options = engine_options
        self.engine: Optional[AsyncEngine] = None
        self.connection: Optional[AsyncConnection] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    async def connect(self) -> None:
        """
        Open the shared connection.

        Raises:
            DatabaseConnectionError: If the database is unreachable or rejects the credentials
        """
        try:
            self.engine = create_async_engine(self.url, **self.engine_options)
            self.connection = await self.engine.connect()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to connect to database", error=str(e))
            if self.engine is not None:
                await self.engine.dispose()
                self.engine = None
            raise DatabaseConnectionError(str(e)) from e

        logger.info("Connected to database", dialect=self.engine.dialect.name)

    async def disconnect(self) -> None:
        """Close the shared connection and dispose of the engine."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            logger.info("Disconnected from database")

    async def execute(
        self,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
        return_inserted_id: bool = False
    ) -> QueryResult:
        """
        Execute one parameterized statement in its own transaction.

        Args:
            sql: Statement with named bind parameters (":name")
            params: Values bound to the statement's parameters
            return_inserted_id: Report the generated key of an INSERT as inserted_id

        Returns:
            QueryResult with rows for SELECTs, or affected count and inserted id for writes

        Raises:
            QueryError: If the statement fails or the connector is not connected
        """
        if self.connection is None:
            raise QueryError("Database connection is not open")

        async with self._lock:
            try:
                result = await self.connection.execute(text(sql), dict(params or {}))
                if result.returns_rows:
                    query_result = QueryResult(rows=[dict(row) for row in result.mappings().all()])
                else:
                    query_result = QueryResult(
                        affected_count=result.rowcount,
                        inserted_id=(result.lastrowid or None) if return_inserted_id else None,
                    )
                await self.connection.commit()
                return query_result

            except SQLAlchemyError as e:
                logger.error("Query failed", sql=sql, error=str(e))
                await self._rollback()
                raise QueryError(str(e)) from e

    async def _rollback(self) -> None:
        """Roll back the failed statement's transaction, if one is still open."""
        try:
            if self.connection is not None and self.connection.in_transaction():
                await self.connection.rollback()
        except SQLAlchemyError as e:
            logger.warning("Rollback failed", error=str(e))
