"""PostgreSQL adapter."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from db_crud_mcp.adapters.base import BaseAdapter
from db_crud_mcp.models.capabilities import DatabaseCapabilities
from db_crud_mcp.models.schema import EnumConstraint
from db_crud_mcp.utils.enum_literals import parse_enum_literals


class PostgresAdapter(BaseAdapter):
    """PostgreSQL adapter; enum columns come from user-defined enum types."""

    @property
    def capabilities(self) -> DatabaseCapabilities:
        """PostgreSQL supports all editor features."""
        return DatabaseCapabilities(
            foreign_keys=True,
            enum_types=True,
        )

    async def get_enum_columns(
        self, conn: AsyncConnection, table_name: str
    ) -> dict[str, EnumConstraint]:
        """Render each enum type's labels as an enum(...) declaration and parse it."""
        # Only quotes are doubled; quote_literal would also E-escape backslashes
        query = text("""
            SELECT
                a.attname,
                'enum(' || string_agg(
                    '''' || replace(e.enumlabel, '''', '''''') || '''', ','
                    ORDER BY e.enumsortorder
                ) || ')',
                NOT a.attnotnull
            FROM pg_catalog.pg_attribute a
            JOIN pg_catalog.pg_class c ON c.oid = a.attrelid
            JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
            JOIN pg_catalog.pg_enum e ON e.enumtypid = a.atttypid
            WHERE c.relname = :table_name
              AND n.nspname = current_schema()
              AND a.attnum > 0
              AND NOT a.attisdropped
            GROUP BY a.attname, a.attnum, a.attnotnull
            ORDER BY a.attnum
        """)

        result = await conn.execute(query, {"table_name": table_name})
        enums: dict[str, EnumConstraint] = {}
        for row in result.fetchall():
            enums[row[0]] = EnumConstraint(
                values=parse_enum_literals(row[1]),
                nullable=bool(row[2]),
            )
        return enums
