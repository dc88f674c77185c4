"""Loosely-typed cell values and their text rendering.

Column types are unknown until a table is loaded, so a cell is modelled as a
union over the native types the drivers hand back. Rendering to text
dispatches on the runtime type.
"""

import base64
import datetime
import decimal
from typing import Optional, Union

CellValue = Optional[
    Union[
        bool,
        int,
        float,
        decimal.Decimal,
        str,
        datetime.date,
        datetime.time,
        datetime.datetime,
        datetime.timedelta,
        bytes,
    ]
]


def value_to_text(value: CellValue) -> str:
    """
    Render a cell value as display/export text.

    Args:
        value: Native value as returned by the driver

    Returns:
        Text form; NULL becomes the empty string
    """
    if value is None:
        return ""

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    return str(value)
