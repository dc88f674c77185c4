"""Comma-separated export of loaded table data.

Quoting is minimal: a value is wrapped in double quotes only when its text
contains a comma. Embedded quotes and newlines are written as-is.
"""

from typing import Any, Iterable, Sequence

from db_crud_mcp.utils.values import value_to_text


def _format_cell(value: Any) -> str:
    text = value_to_text(value)
    if "," in text:
        return f'"{text}"'
    return text


def to_csv(columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """
    Convert columns and rows to CSV text.

    Args:
        columns: Header labels
        rows: Row value sequences aligned with columns

    Returns:
        CSV text with a newline after every line, including the last
    """
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(_format_cell(value) for value in row))
    return "".join(line + "\n" for line in lines)
