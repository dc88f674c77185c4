"""Bounded table scans and reference value lookups."""

import logging
import time
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from db_crud_mcp.core.connection import DatabaseConnection
from db_crud_mcp.core.inspector import check_columns, resolve_table_columns
from db_crud_mcp.core.statements import build_reference_select, build_select
from db_crud_mcp.exceptions import QueryError
from db_crud_mcp.models.query import TableData

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Read-side operations: loading rows and foreign key choice values."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize query executor.

        Args:
            connection: Database connection manager
        """
        self.connection = connection

    async def load_table(self, table_name: str, limit: int = 200) -> TableData:
        """
        Load up to ``limit`` rows of a table with ``SELECT *``.

        Values keep their native driver types; nothing is coerced to text.

        Args:
            table_name: Table name
            limit: Maximum number of rows to return

        Returns:
            Column labels and row tuples

        Raises:
            QueryError: If the limit is malformed or the scan fails
            ValidationError: If the table does not exist
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise QueryError(f"Invalid row limit: {limit!r}")

        statement = build_select(self.connection.sql_dialect, table_name, limit)
        start_time = time.time()

        async with self.connection.get_connection() as conn:
            try:
                await resolve_table_columns(conn, table_name)
                result = await conn.execute(statement.clause(), statement.params)
                columns = list(result.keys())
                rows = [tuple(row) for row in result.fetchall()]
            except SQLAlchemyError as e:
                raise QueryError(f"Failed to load {table_name}: {e}") from e

        logger.debug(
            f"Loaded {len(rows)} rows from {table_name} "
            f"in {(time.time() - start_time) * 1000:.1f} ms"
        )
        return TableData(table=table_name, columns=columns, rows=rows, limit=limit)

    async def get_reference_values(self, table_name: str, column: str) -> list[Any]:
        """
        Get every value of a referenced column, ascending.

        Duplicates are kept: one entry per row of the referenced table.

        Args:
            table_name: Referenced table
            column: Referenced column

        Returns:
            Column values sorted by the column

        Raises:
            QueryError: If the lookup fails
            ValidationError: If the table or column does not exist
        """
        statement = build_reference_select(self.connection.sql_dialect, table_name, column)

        async with self.connection.get_connection() as conn:
            try:
                known = await resolve_table_columns(conn, table_name)
                check_columns(table_name, known, [column])
                result = await conn.execute(statement.clause())
                return [row[0] for row in result.fetchall()]
            except SQLAlchemyError as e:
                raise QueryError(
                    f"Failed to read reference values {table_name}.{column}: {e}"
                ) from e
