"""Row insert/update/delete over arbitrary tables."""

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy.exc import SQLAlchemyError

from db_crud_mcp.core.connection import DatabaseConnection
from db_crud_mcp.core.inspector import check_columns, resolve_table_columns
from db_crud_mcp.core.statements import (
    Statement,
    build_delete,
    build_insert,
    build_update,
)
from db_crud_mcp.exceptions import QueryError, ValidationError
from db_crud_mcp.models.query import MutationResult

logger = logging.getLogger(__name__)


class RowEditor:
    """
    Executes generated INSERT / UPDATE-by-key / DELETE-by-key statements.

    Preconditions are checked before a connection is acquired. Each call uses
    one connection and commits on success. The affected row count is reported
    but never checked: a key matching zero or several rows is not an error.
    """

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize row editor.

        Args:
            connection: Database connection manager
        """
        self.connection = connection

    def _ensure_writable(self) -> None:
        if self.connection.config.read_only:
            raise ValidationError("Connection is configured read-only")

    async def _execute(
        self, operation: str, table_name: str, statement: Statement
    ) -> MutationResult:
        # Statement preconditions have already been checked by the builder
        self._ensure_writable()
        try:
            async with self.connection.transaction() as conn:
                known = await resolve_table_columns(conn, table_name)
                check_columns(table_name, known, statement.columns)
                result = await conn.execute(statement.clause(), statement.params)
                rowcount = result.rowcount if result.rowcount >= 0 else None
        except SQLAlchemyError as e:
            raise QueryError(f"{operation} on {table_name} failed: {e}") from e

        logger.info(f"{operation} on {table_name}: {rowcount} row(s) affected")
        return MutationResult(
            table=table_name,
            operation=operation,
            statement=statement.sql,
            rowcount=rowcount,
        )

    async def insert_row(
        self, table_name: str, values: Mapping[str, Any]
    ) -> MutationResult:
        """
        Insert one row.

        Auto-generated columns are not filled in; callers omit them.

        Args:
            table_name: Table name
            values: Column -> value payload, in statement order

        Returns:
            Mutation result

        Raises:
            ValidationError: If values is empty or names an unknown column
            QueryError: If the database rejects the statement
        """
        statement = build_insert(self.connection.sql_dialect, table_name, values)
        return await self._execute("INSERT", table_name, statement)

    async def update_row(
        self,
        table_name: str,
        key_columns: Sequence[str],
        new_values: Mapping[str, Any],
        key_values: Mapping[str, Any],
    ) -> MutationResult:
        """
        Update the row identified by its primary key.

        Key columns present in new_values are ignored; keys are never changed.

        Args:
            table_name: Table name
            key_columns: Primary key columns
            new_values: Column -> new value
            key_values: Key column -> current value (missing keys bind NULL)

        Returns:
            Mutation result

        Raises:
            ValidationError: If there is no key or no editable column
            QueryError: If the database rejects the statement
        """
        statement = build_update(
            self.connection.sql_dialect, table_name, key_columns, new_values, key_values
        )
        return await self._execute("UPDATE", table_name, statement)

    async def delete_row(
        self,
        table_name: str,
        key_columns: Sequence[str],
        key_values: Mapping[str, Any],
    ) -> MutationResult:
        """
        Delete the row identified by its primary key.

        Args:
            table_name: Table name
            key_columns: Primary key columns
            key_values: Key column -> value (missing keys bind NULL)

        Returns:
            Mutation result

        Raises:
            ValidationError: If there is no key
            QueryError: If the database rejects the statement
        """
        statement = build_delete(
            self.connection.sql_dialect, table_name, key_columns, key_values
        )
        return await self._execute("DELETE", table_name, statement)
