"""Database adapters for specific database implementations."""

from .base import BaseAdapter
from .mysql import MySQLAdapter
from .postgresql import PostgresAdapter
from .sqlite import SQLiteAdapter
from ..models.config import DatabaseConfig

__all__ = [
    "BaseAdapter",
    "PostgresAdapter",
    "MySQLAdapter",
    "SQLiteAdapter",
    "create_adapter",
]


def create_adapter(config: DatabaseConfig) -> BaseAdapter:
    """
    Factory function to create appropriate database adapter.

    Args:
        config: Database configuration

    Returns:
        Database adapter instance

    Raises:
        ValueError: If database type is not supported
    """
    dialect = config.dialect

    adapters = {
        "postgresql": PostgresAdapter,
        "mysql": MySQLAdapter,
        "sqlite": SQLiteAdapter,
    }

    adapter_class = adapters.get(dialect)

    if adapter_class is None:
        raise ValueError(
            f"Unsupported database dialect: {dialect}. "
            f"Supported dialects: {', '.join(adapters.keys())}"
        )

    return adapter_class()
