"""Parser for enumerated column type declarations."""

from typing import Optional


def parse_enum_literals(column_type: Optional[str]) -> list[str]:
    """
    Parse an enum type declaration into its literal values.

    Handles declarations such as ``enum('A','B,C','D''E')``: commas inside a
    quoted literal are content, and a doubled single quote inside a literal
    is one quote character.

    Args:
        column_type: Declared column type as reported by the catalog

    Returns:
        Literal values in declaration order, or an empty list when the
        declaration is malformed
    """
    if not column_type:
        return []

    start = column_type.find("(")
    end = column_type.rfind(")")
    if start < 0 or end < 0 or end <= start:
        return []

    inside = column_type[start + 1 : end].strip()

    values: list[str] = []
    current: list[str] = []
    in_quote = False
    i = 0
    while i < len(inside):
        ch = inside[i]

        if ch == "'":
            if in_quote and i + 1 < len(inside) and inside[i + 1] == "'":
                current.append("'")
                i += 2
                continue
            in_quote = not in_quote
        elif ch == "," and not in_quote:
            values.append("".join(current))
            current = []
        elif in_quote:
            current.append(ch)
        i += 1

    if current:
        values.append("".join(current))
    return values
