"""Core database operations layer."""

from .connection import DatabaseConnection
from .editor import RowEditor
from .executor import QueryExecutor
from .inspector import MetadataInspector

__all__ = [
    "DatabaseConnection",
    "MetadataInspector",
    "QueryExecutor",
    "RowEditor",
]
