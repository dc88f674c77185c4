"""Base adapter abstract class for database-specific implementations."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncConnection

from db_crud_mcp.models.capabilities import DatabaseCapabilities
from db_crud_mcp.models.schema import EnumConstraint


class BaseAdapter(ABC):
    """Base adapter defining database-specific interface."""

    @property
    @abstractmethod
    def capabilities(self) -> DatabaseCapabilities:
        """Get capabilities for this database type."""
        ...

    @abstractmethod
    async def get_enum_columns(
        self, conn: AsyncConnection, table_name: str
    ) -> dict[str, EnumConstraint]:
        """
        Find enumerated columns of a table.

        Args:
            conn: Database connection
            table_name: Table name (already verified to exist)

        Returns:
            Enum constraint by column name; empty when the table has none
        """
        ...

    def is_auto_generated(
        self, column: dict[str, Any], primary_key: Sequence[str]
    ) -> bool:
        """
        Decide whether the server assigns a column's value on insert.

        Args:
            column: Reflected column entry from ``Inspector.get_columns``
            primary_key: Primary key columns of the same table

        Returns:
            True for auto-increment or identity columns
        """
        if column.get("autoincrement") is True:
            return True
        return bool(column.get("identity"))
