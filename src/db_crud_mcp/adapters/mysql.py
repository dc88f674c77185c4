"""MySQL adapter."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from db_crud_mcp.adapters.base import BaseAdapter
from db_crud_mcp.models.capabilities import DatabaseCapabilities
from db_crud_mcp.models.schema import EnumConstraint
from db_crud_mcp.utils.enum_literals import parse_enum_literals


class MySQLAdapter(BaseAdapter):
    """MySQL/MariaDB adapter with native ENUM columns."""

    @property
    def capabilities(self) -> DatabaseCapabilities:
        """MySQL reports foreign keys and enums."""
        return DatabaseCapabilities(
            foreign_keys=True,  # InnoDB only; MyISAM tables report none
            enum_types=True,
        )

    async def get_enum_columns(
        self, conn: AsyncConnection, table_name: str
    ) -> dict[str, EnumConstraint]:
        """Read ENUM declarations from INFORMATION_SCHEMA."""
        # COLUMN_TYPE carries the literals, e.g. enum('A','B')
        query = text("""
            SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = DATABASE()
              AND TABLE_NAME = :table_name
              AND DATA_TYPE = 'enum'
            ORDER BY ORDINAL_POSITION
        """)

        result = await conn.execute(query, {"table_name": table_name})
        enums: dict[str, EnumConstraint] = {}
        for row in result.fetchall():
            enums[row[0]] = EnumConstraint(
                values=parse_enum_literals(row[1]),
                nullable=str(row[2]).upper() == "YES",
            )
        return enums
