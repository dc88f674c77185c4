"""Utility modules for the table editor."""

from db_crud_mcp.utils.csv_export import to_csv
from db_crud_mcp.utils.enum_literals import parse_enum_literals
from db_crud_mcp.utils.serialization import (
    convert_rows_to_json_safe,
    convert_value_to_json_safe,
    dumps,
)
from db_crud_mcp.utils.values import CellValue, value_to_text

__all__ = [
    "CellValue",
    "value_to_text",
    "parse_enum_literals",
    "to_csv",
    "convert_value_to_json_safe",
    "convert_rows_to_json_safe",
    "dumps",
]
