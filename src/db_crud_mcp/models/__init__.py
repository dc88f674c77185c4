"""Pydantic models for configuration, schema metadata and results."""

from .capabilities import DatabaseCapabilities
from .config import DatabaseConfig, load_config
from .query import MutationResult, TableData
from .schema import EnumConstraint, ForeignKeyRef, TableMetadata

__all__ = [
    "DatabaseCapabilities",
    "DatabaseConfig",
    "load_config",
    "TableData",
    "MutationResult",
    "ForeignKeyRef",
    "EnumConstraint",
    "TableMetadata",
]
