"""SQLite adapter."""

from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncConnection

from db_crud_mcp.adapters.base import BaseAdapter
from db_crud_mcp.models.capabilities import DatabaseCapabilities
from db_crud_mcp.models.schema import EnumConstraint


class SQLiteAdapter(BaseAdapter):
    """SQLite adapter. No enum type; rowid aliases count as auto-generated."""

    @property
    def capabilities(self) -> DatabaseCapabilities:
        """SQLite has foreign keys but no enum column type."""
        return DatabaseCapabilities(
            foreign_keys=True,
            enum_types=False,
        )

    async def get_enum_columns(
        self, conn: AsyncConnection, table_name: str
    ) -> dict[str, EnumConstraint]:
        """SQLite has no closed enumeration type."""
        return {}

    def is_auto_generated(
        self, column: dict[str, Any], primary_key: Sequence[str]
    ) -> bool:
        """A lone INTEGER PRIMARY KEY column aliases the rowid."""
        if super().is_auto_generated(column, primary_key):
            return True
        return (
            len(primary_key) == 1
            and column["name"] == primary_key[0]
            and str(column["type"]).upper() == "INTEGER"
        )
