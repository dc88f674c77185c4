"""Loaded table data and mutation result models."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class TableData(BaseModel):
    """One snapshot of a table: column labels plus positional row tuples."""

    table: str = Field(..., description="Table the rows were loaded from")
    columns: list[str] = Field(..., description="Column labels in result order")
    rows: list[tuple[Any, ...]] = Field(
        default_factory=list, description="Rows aligned positionally with columns"
    )
    limit: Optional[int] = Field(None, description="Row-count limit used for the scan")

    @property
    def row_count(self) -> int:
        """Number of rows loaded."""
        return len(self.rows)

    @property
    def truncated(self) -> bool:
        """Whether the scan may have stopped at the limit."""
        return self.limit is not None and len(self.rows) >= self.limit

    def row_as_dict(self, index: int) -> dict[str, Any]:
        """Return one row as a column -> value mapping."""
        return dict(zip(self.columns, self.rows[index]))

    def get_column_values(self, column: str) -> list[Any]:
        """Extract all values for a specific column."""
        position = self.columns.index(column)
        return [row[position] for row in self.rows]


class MutationResult(BaseModel):
    """Outcome of an insert, update or delete."""

    table: str = Field(..., description="Affected table")
    operation: str = Field(..., description="INSERT, UPDATE or DELETE")
    statement: str = Field(..., description="Executed SQL text")
    rowcount: Optional[int] = Field(
        None, description="Driver-reported affected rows (informational only)"
    )
