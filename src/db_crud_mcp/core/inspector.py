"""Metadata inspection using SQLAlchemy reflection."""

import logging
from typing import Any, Callable, Iterable, TypeVar, cast

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from db_crud_mcp.adapters.base import BaseAdapter
from db_crud_mcp.core.connection import DatabaseConnection
from db_crud_mcp.exceptions import QueryError, ValidationError
from db_crud_mcp.models.schema import EnumConstraint, ForeignKeyRef, TableMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def resolve_table_columns(conn: AsyncConnection, table_name: str) -> list[str]:
    """
    Look up a table's column names on an open connection.

    Used to check that every identifier placed in generated SQL comes from
    the live schema.

    Args:
        conn: Open connection
        table_name: Table name supplied by the caller

    Returns:
        Column names in physical order

    Raises:
        ValidationError: If the table does not exist
    """

    def get_column_names(sync_conn) -> list[str]:
        inspector = sa_inspect(sync_conn)
        if not inspector.has_table(table_name):
            raise ValidationError(f"Unknown table: {table_name}")
        return [col["name"] for col in inspector.get_columns(table_name)]

    return await conn.run_sync(get_column_names)


def check_columns(table_name: str, known: list[str], requested: Iterable[str]) -> None:
    """
    Ensure requested column names exist in the table.

    Raises:
        ValidationError: Naming the first unknown column
    """
    for column in requested:
        if column not in known:
            raise ValidationError(f"Unknown column {column!r} in table {table_name}")


def fold_foreign_keys(
    table_name: str, fk_data: Iterable[dict[str, Any]]
) -> dict[str, ForeignKeyRef]:
    """
    Flatten reflected foreign key constraints into per-column references.

    Args:
        table_name: Table the constraints belong to (for logging)
        fk_data: Entries as returned by ``Inspector.get_foreign_keys``

    Returns:
        Reference by constrained column; later constraints overwrite earlier ones
    """
    refs: dict[str, ForeignKeyRef] = {}
    for fk in fk_data:
        for local, remote in zip(fk["constrained_columns"], fk["referred_columns"]):
            if local in refs:
                logger.debug(
                    f"{table_name}.{local} appears in several foreign keys; "
                    f"keeping {fk['referred_table']}.{remote}"
                )
            refs[local] = ForeignKeyRef(
                column=local,
                referenced_table=fk["referred_table"],
                referenced_column=remote,
            )
    return refs


class MetadataInspector:
    """Derives the per-table editing contract from catalog metadata."""

    def __init__(self, connection: DatabaseConnection, adapter: BaseAdapter):
        """
        Initialize metadata inspector.

        Args:
            connection: Database connection manager
            adapter: Database-specific adapter for extended functionality
        """
        self.connection = connection
        self.adapter = adapter

    async def _reflect(
        self, table_name: str, fn: Callable[[Any], T]
    ) -> T:
        """Run a reflection callback against an existing table on a fresh connection."""
        async with self.connection.get_connection() as conn:

            def run(sync_conn) -> T:
                inspector = sa_inspect(sync_conn)
                if not inspector.has_table(table_name):
                    raise ValidationError(f"Unknown table: {table_name}")
                return fn(inspector)

            try:
                return await conn.run_sync(run)
            except SQLAlchemyError as e:
                raise QueryError(f"Metadata query failed for {table_name}: {e}") from e

    async def list_tables(self) -> list[str]:
        """
        List base tables (no views) in the default schema.

        Returns:
            Sorted table names
        """
        async with self.connection.get_connection() as conn:

            def get_table_names(sync_conn) -> list[str]:
                return list(sa_inspect(sync_conn).get_table_names())

            try:
                names = await conn.run_sync(get_table_names)
            except SQLAlchemyError as e:
                raise QueryError(f"Could not list tables: {e}") from e

        return sorted(names)

    async def get_primary_key_columns(self, table_name: str) -> list[str]:
        """
        Get primary key columns ordered by their declared key sequence.

        Args:
            table_name: Table name

        Returns:
            Key column names; empty when the table has no primary key
        """

        def get_pk(inspector) -> list[str]:
            pk_constraint = inspector.get_pk_constraint(table_name)
            return list(pk_constraint.get("constrained_columns") or [])

        return await self._reflect(table_name, get_pk)

    async def get_auto_generated_columns(self, table_name: str) -> set[str]:
        """
        Get columns whose values the server assigns on insert.

        Args:
            table_name: Table name

        Returns:
            Names of auto-increment/identity columns
        """

        def get_auto(inspector) -> set[str]:
            pk_constraint = inspector.get_pk_constraint(table_name)
            primary_key = list(pk_constraint.get("constrained_columns") or [])
            return {
                col["name"]
                for col in inspector.get_columns(table_name)
                if self.adapter.is_auto_generated(
                    cast(dict[str, Any], col), primary_key
                )
            }

        return await self._reflect(table_name, get_auto)

    async def get_foreign_keys(self, table_name: str) -> dict[str, ForeignKeyRef]:
        """
        Get foreign key references keyed by local column.

        Composite keys are split into column pairs. When a column takes part
        in more than one foreign key, the last one reported wins.

        Args:
            table_name: Table name

        Returns:
            Reference by constrained column name
        """
        if not self.adapter.capabilities.foreign_keys:
            return {}

        def get_fks(inspector) -> list[dict[str, Any]]:
            return [cast(dict[str, Any], fk) for fk in inspector.get_foreign_keys(table_name)]

        fk_data = await self._reflect(table_name, get_fks)
        return fold_foreign_keys(table_name, fk_data)

    async def get_enum_columns(self, table_name: str) -> dict[str, EnumConstraint]:
        """
        Get enumerated columns with their allowed literals.

        Args:
            table_name: Table name

        Returns:
            Enum constraint by column name
        """
        async with self.connection.get_connection() as conn:
            try:
                await resolve_table_columns(conn, table_name)
                if not self.adapter.capabilities.enum_types:
                    return {}
                return await self.adapter.get_enum_columns(conn, table_name)
            except SQLAlchemyError as e:
                raise QueryError(f"Enum lookup failed for {table_name}: {e}") from e

    async def describe_table(self, table_name: str) -> TableMetadata:
        """
        Gather the full editing contract for a table.

        Each part is fetched with its own connection, so the result reflects
        the schema at the time of the call.

        Args:
            table_name: Table name

        Returns:
            Table metadata
        """
        return TableMetadata(
            name=table_name,
            primary_key=await self.get_primary_key_columns(table_name),
            auto_generated=await self.get_auto_generated_columns(table_name),
            foreign_keys=await self.get_foreign_keys(table_name),
            enums=await self.get_enum_columns(table_name),
        )
