"""Turning user-entered row values into insert/update payloads.

Policy for values collected from an edit form:

- INSERT: auto-generated columns are left out; a blank text field is left
  out so the column default applies.
- UPDATE: key and auto-generated columns are left out; a blank text field
  sets the column to NULL.
- The ``(NULL)`` choice offered for nullable enum columns means NULL.
"""

from typing import Any, Mapping, Sequence

from db_crud_mcp.models.schema import EnumConstraint, TableMetadata

NULL_CHOICE = "(NULL)"


def enum_choices(constraint: EnumConstraint) -> list[str]:
    """Selectable values for an enum column, with the NULL choice first when allowed."""
    if constraint.nullable:
        return [NULL_CHOICE, *constraint.values]
    return list(constraint.values)


def _normalize(value: Any) -> tuple[bool, Any]:
    """Return (is_blank, value) with text stripped and the NULL choice resolved."""
    if value is None or value == NULL_CHOICE:
        return False, None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped == "", stripped
    return False, value


def prepare_insert_values(
    metadata: TableMetadata, raw_values: Mapping[str, Any]
) -> dict[str, Any]:
    """
    Build an insert payload from form values.

    Args:
        metadata: Table editing contract
        raw_values: Column -> entered value

    Returns:
        Payload for RowEditor.insert_row (may be empty)
    """
    values: dict[str, Any] = {}
    for column, raw in raw_values.items():
        if column in metadata.auto_generated:
            continue
        blank, value = _normalize(raw)
        if blank:
            continue
        values[column] = value
    return values


def prepare_update_values(
    metadata: TableMetadata, raw_values: Mapping[str, Any]
) -> dict[str, Any]:
    """
    Build an update payload from form values.

    Args:
        metadata: Table editing contract
        raw_values: Column -> entered value

    Returns:
        Payload for RowEditor.update_row
    """
    values: dict[str, Any] = {}
    for column, raw in raw_values.items():
        if not metadata.is_editable(column):
            continue
        blank, value = _normalize(raw)
        values[column] = None if blank else value
    return values


def key_values_from_row(
    key_columns: Sequence[str], row: Mapping[str, Any]
) -> dict[str, Any]:
    """Extract the primary key values of a loaded row."""
    return {column: row.get(column) for column in key_columns}
