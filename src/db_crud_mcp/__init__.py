"""
db_crud_mcp - generic table browser and row editor

Discovers tables and their editing metadata (primary keys, auto-generated
columns, foreign key references, enum columns) from the live catalog and
exposes insert/update/delete by primary key over any table, plus an MCP
server surface for PostgreSQL, MySQL and SQLite.
"""

__version__ = "0.1.0"

from .core import DatabaseConnection, MetadataInspector, QueryExecutor, RowEditor
from .exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    DbCrudError,
    QueryError,
    ValidationError,
)
from .models import (
    DatabaseConfig,
    EnumConstraint,
    ForeignKeyRef,
    MutationResult,
    TableData,
    TableMetadata,
    load_config,
)
from .utils import parse_enum_literals, to_csv

__all__ = [
    "DatabaseConnection",
    "MetadataInspector",
    "QueryExecutor",
    "RowEditor",
    "DatabaseConfig",
    "load_config",
    "TableData",
    "MutationResult",
    "TableMetadata",
    "ForeignKeyRef",
    "EnumConstraint",
    "parse_enum_literals",
    "to_csv",
    "DbCrudError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "QueryError",
    "ValidationError",
]
