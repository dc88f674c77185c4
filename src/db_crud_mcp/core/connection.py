"""Database connection management with SQLAlchemy."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from db_crud_mcp.exceptions import DatabaseConnectionError
from db_crud_mcp.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Manages the SQLAlchemy async engine and hands out scoped connections."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection.

        Args:
            config: Database configuration with connection URL and pool settings
        """
        self.config = config
        self.engine: Optional[AsyncEngine] = None
        self._dialect = config.dialect
        self._driver = config.driver

    async def initialize(self) -> None:
        """Create the async engine. Does not open a connection."""
        if self.engine is not None:
            return  # Already initialized

        engine_kwargs: dict[str, Any] = {
            "echo": self.config.echo_sql,
        }

        # SQLite picks its own pool class; queue pool arguments do not apply
        if self._dialect != "sqlite":
            engine_kwargs.update(
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_timeout=self.config.pool_timeout,
                pool_pre_ping=True,  # Verify connections before using
            )

        self.engine = create_async_engine(self.config.connection_url, **engine_kwargs)
        logger.info(f"Created {self._dialect}+{self._driver} engine")

    async def dispose(self) -> None:
        """Dispose of the connection pool and cleanup resources."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Get a connection from the pool as an async context manager.

        The connection is returned to the pool on every exit path; any
        uncommitted work is rolled back at that point.

        Yields:
            AsyncConnection for executing queries

        Raises:
            RuntimeError: If engine not initialized
            DatabaseConnectionError: If no connection can be established
        """
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )

        try:
            conn = await self.engine.connect()
        except (DBAPIError, OSError) as e:
            raise DatabaseConnectionError(
                f"Could not connect to {self.config.sanitized_url}: {e}"
            ) from e

        try:
            if self.config.read_only:
                try:
                    await self._set_readonly(conn)
                except (DBAPIError, OSError) as e:
                    raise DatabaseConnectionError(
                        f"Could not start a read-only session on "
                        f"{self.config.sanitized_url}: {e}"
                    ) from e
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Get a connection whose work is committed when the block exits cleanly.

        Yields:
            AsyncConnection for executing statements
        """
        async with self.get_connection() as conn:
            yield conn
            await conn.commit()

    async def _set_readonly(self, conn: AsyncConnection) -> None:
        """Set connection to read-only mode based on database dialect."""
        if self._dialect == "postgresql":
            await conn.execute(
                text("SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY")
            )
        elif self._dialect == "mysql":
            await conn.execute(text("SET SESSION TRANSACTION READ ONLY"))
        elif self._dialect == "sqlite":
            await conn.execute(text("PRAGMA query_only = ON"))

    @property
    def sql_dialect(self) -> Dialect:
        """SQLAlchemy dialect object, used for identifier quoting."""
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )
        return self.engine.dialect

    async def __aenter__(self) -> "DatabaseConnection":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.dispose()
