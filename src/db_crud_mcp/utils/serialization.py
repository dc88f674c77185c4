"""JSON serialization utilities using orjson for speed and correctness.

orjson handles most database types automatically:
- datetime, date, time → ISO format
- UUID → string
- dataclasses, pydantic models → dict (via model_dump upstream)

The default handler covers the rest of the cell value union.
"""

import base64
import datetime
import decimal
from typing import Any, Iterable, Sequence

import orjson


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation

    Raises:
        TypeError: If object cannot be serialized
    """
    # Decimal - keep precision by emitting text
    if isinstance(obj, decimal.Decimal):
        return str(obj)

    # timedelta - convert to total seconds
    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    # bytes/bytearray/memoryview - try UTF-8 decode, fall back to base64
    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    # Sets - convert to sorted list for stable output
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)

    # tuples from result rows
    if isinstance(obj, tuple):
        return list(obj)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a value to JSON-serializable format.

    Uses orjson's serialization and decodes back to Python objects so the
    result matches what will actually be serialized.

    Args:
        value: Value to convert

    Returns:
        JSON-serializable value
    """
    try:
        return orjson.loads(orjson.dumps(value, default=_default_handler))
    except TypeError:
        # If orjson can't handle it, convert to string as fallback
        return str(value)


def convert_rows_to_json_safe(rows: Iterable[Sequence[Any]]) -> list[list[Any]]:
    """
    Convert positional rows to lists of JSON-serializable values.

    Args:
        rows: Row tuples

    Returns:
        List of lists with JSON-serializable values
    """
    return [[convert_value_to_json_safe(value) for value in row] for row in rows]


def dumps(obj: Any) -> str:
    """
    Serialize object to an indented JSON string using orjson.

    Args:
        obj: Object to serialize

    Returns:
        JSON string
    """
    return orjson.dumps(
        obj, default=_default_handler, option=orjson.OPT_INDENT_2
    ).decode("utf-8")
