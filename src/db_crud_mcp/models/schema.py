"""Typed results of schema introspection."""

from pydantic import BaseModel, Field


class ForeignKeyRef(BaseModel):
    """One imported key: a local column pointing at another table's column."""

    column: str = Field(..., description="Constrained (local) column name")
    referenced_table: str = Field(..., description="Referenced table name")
    referenced_column: str = Field(..., description="Referenced column name")

    @property
    def target(self) -> str:
        """Reference rendered as table.column."""
        return f"{self.referenced_table}.{self.referenced_column}"


class EnumConstraint(BaseModel):
    """Closed list of literals allowed in an enumerated column."""

    values: list[str] = Field(
        default_factory=list, description="Allowed literals in declaration order"
    )
    nullable: bool = Field(default=False, description="Whether NULL is allowed")


class TableMetadata(BaseModel):
    """Editing contract for one table, derived from the live catalog."""

    name: str = Field(..., description="Table name")
    primary_key: list[str] = Field(
        default_factory=list,
        description="Primary key columns in key-sequence order (empty: no key)",
    )
    auto_generated: set[str] = Field(
        default_factory=set, description="Columns assigned by the server on insert"
    )
    foreign_keys: dict[str, ForeignKeyRef] = Field(
        default_factory=dict, description="Foreign key references by local column"
    )
    enums: dict[str, EnumConstraint] = Field(
        default_factory=dict, description="Enumerated columns by name"
    )

    @property
    def has_primary_key(self) -> bool:
        """Whether rows can be addressed for update/delete."""
        return bool(self.primary_key)

    def is_editable(self, column: str) -> bool:
        """Whether a column may appear in an UPDATE SET clause."""
        return column not in self.primary_key and column not in self.auto_generated

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "orders",
                    "primary_key": ["id"],
                    "auto_generated": ["id"],
                    "foreign_keys": {
                        "customer_id": {
                            "column": "customer_id",
                            "referenced_table": "customers",
                            "referenced_column": "id",
                        }
                    },
                    "enums": {
                        "status": {"values": ["new", "paid"], "nullable": False}
                    },
                }
            ]
        }
    }
