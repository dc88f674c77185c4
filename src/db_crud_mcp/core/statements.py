"""SQL text generation for single-table, key-filtered statements.

Identifiers cannot be bound, so they are quoted with the dialect's own
identifier preparer. Values are always bound as ``:p0``, ``:p1`` ... in the
order they appear in the statement.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from sqlalchemy import TextClause, text
from sqlalchemy.engine import Dialect

from db_crud_mcp.exceptions import ValidationError


@dataclass(frozen=True)
class Statement:
    """Generated SQL text with its ordered bind parameters."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)
    columns: tuple[str, ...] = ()

    @property
    def bound_values(self) -> list[Any]:
        """Bound values in binding order."""
        return list(self.params.values())

    def clause(self) -> TextClause:
        """Executable SQLAlchemy text clause."""
        return text(self.sql)


class _Binder:
    """Allocates sequential bind parameter names."""

    def __init__(self) -> None:
        self.params: dict[str, Any] = {}

    def bind(self, value: Any) -> str:
        name = f"p{len(self.params)}"
        self.params[name] = value
        return f":{name}"


def quote_identifier(dialect: Dialect, name: str) -> str:
    """
    Quote a table or column name for the given dialect.

    Args:
        dialect: SQLAlchemy dialect supplying the quoting rule
        name: Identifier taken from schema introspection

    Returns:
        Quoted identifier, safe to place in text() SQL
    """
    quoted = dialect.identifier_preparer.quote_identifier(name)
    # text() treats a bare colon as a bind marker
    return quoted.replace(":", "\\:")


def build_select(dialect: Dialect, table: str, limit: int) -> Statement:
    """Build a bounded ``SELECT *`` scan."""
    binder = _Binder()
    sql = f"SELECT * FROM {quote_identifier(dialect, table)} LIMIT {binder.bind(limit)}"
    return Statement(sql=sql, params=binder.params)


def build_reference_select(dialect: Dialect, table: str, column: str) -> Statement:
    """Build the ordered scan of one referenced column."""
    col = quote_identifier(dialect, column)
    sql = f"SELECT {col} FROM {quote_identifier(dialect, table)} ORDER BY {col}"
    return Statement(sql=sql, columns=(column,))


def build_insert(dialect: Dialect, table: str, values: Mapping[str, Any]) -> Statement:
    """
    Build an INSERT with one placeholder per supplied column.

    Raises:
        ValidationError: If values is empty
    """
    if not values:
        raise ValidationError("No values to insert")

    binder = _Binder()
    columns = list(values)
    col_sql = ",".join(quote_identifier(dialect, c) for c in columns)
    placeholders = ",".join(binder.bind(values[c]) for c in columns)
    sql = (
        f"INSERT INTO {quote_identifier(dialect, table)} ({col_sql}) "
        f"VALUES ({placeholders})"
    )
    return Statement(sql=sql, params=binder.params, columns=tuple(columns))


def _where_keys(
    dialect: Dialect,
    binder: _Binder,
    key_columns: Sequence[str],
    key_values: Mapping[str, Any],
) -> str:
    # A key missing from key_values binds NULL
    return " AND ".join(
        f"{quote_identifier(dialect, c)}={binder.bind(key_values.get(c))}"
        for c in key_columns
    )


def build_update(
    dialect: Dialect,
    table: str,
    key_columns: Sequence[str],
    new_values: Mapping[str, Any],
    key_values: Mapping[str, Any],
) -> Statement:
    """
    Build an UPDATE filtered by the primary key.

    Key columns never appear in the SET clause. SET values are bound first,
    key values second.

    Raises:
        ValidationError: If there is no key or nothing left to set
    """
    if not key_columns:
        raise ValidationError("Table has no primary key; update not supported")

    set_columns = [c for c in new_values if c not in key_columns]
    if not set_columns:
        raise ValidationError("No editable columns to update")

    binder = _Binder()
    assignments = ", ".join(
        f"{quote_identifier(dialect, c)}={binder.bind(new_values[c])}"
        for c in set_columns
    )
    where = _where_keys(dialect, binder, key_columns, key_values)
    sql = f"UPDATE {quote_identifier(dialect, table)} SET {assignments} WHERE {where}"
    return Statement(
        sql=sql, params=binder.params, columns=tuple(set_columns) + tuple(key_columns)
    )


def build_delete(
    dialect: Dialect,
    table: str,
    key_columns: Sequence[str],
    key_values: Mapping[str, Any],
) -> Statement:
    """
    Build a DELETE filtered by the primary key.

    Raises:
        ValidationError: If there is no key
    """
    if not key_columns:
        raise ValidationError("Table has no primary key; delete not supported")

    binder = _Binder()
    where = _where_keys(dialect, binder, key_columns, key_values)
    sql = f"DELETE FROM {quote_identifier(dialect, table)} WHERE {where}"
    return Statement(sql=sql, params=binder.params, columns=tuple(key_columns))
