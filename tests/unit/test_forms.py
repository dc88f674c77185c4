"""Unit Tests for edit form value handling"""

from db_crud_mcp.core.forms import (
    NULL_CHOICE,
    enum_choices,
    key_values_from_row,
    prepare_insert_values,
    prepare_update_values,
)
from db_crud_mcp.models.schema import EnumConstraint, TableMetadata


def orders_metadata() -> TableMetadata:
    return TableMetadata(
        name="orders",
        primary_key=["id"],
        auto_generated={"id"},
        enums={"status": EnumConstraint(values=["new", "paid"], nullable=True)},
    )


class TestEnumChoices:
    def test_nullable_offers_null_first(self):
        constraint = EnumConstraint(values=["a", "b"], nullable=True)
        assert enum_choices(constraint) == [NULL_CHOICE, "a", "b"]

    def test_not_null(self):
        constraint = EnumConstraint(values=["a", "b"], nullable=False)
        assert enum_choices(constraint) == ["a", "b"]


class TestPrepareInsertValues:
    """Test insert payloads."""

    def test_auto_generated_skipped(self):
        """Test server-assigned columns are never sent."""
        values = prepare_insert_values(orders_metadata(), {"id": "7", "note": "x"})
        assert values == {"note": "x"}

    def test_blank_text_skipped(self):
        """Test blank fields are omitted so defaults apply."""
        values = prepare_insert_values(orders_metadata(), {"note": "   ", "amount": 3})
        assert values == {"amount": 3}

    def test_text_trimmed(self):
        values = prepare_insert_values(orders_metadata(), {"note": "  hi "})
        assert values == {"note": "hi"}

    def test_null_choice_is_null(self):
        """Test the (NULL) enum choice inserts NULL."""
        values = prepare_insert_values(orders_metadata(), {"status": NULL_CHOICE})
        assert values == {"status": None}

    def test_all_blank_is_empty(self):
        assert prepare_insert_values(orders_metadata(), {"note": ""}) == {}


class TestPrepareUpdateValues:
    """Test update payloads."""

    def test_key_columns_skipped(self):
        """Test key and auto columns never reach the payload."""
        values = prepare_update_values(orders_metadata(), {"id": 1, "note": "x"})
        assert values == {"note": "x"}

    def test_blank_sets_null(self):
        """Test a cleared field sets the column to NULL."""
        values = prepare_update_values(orders_metadata(), {"note": " ", "status": "paid"})
        assert values == {"note": None, "status": "paid"}

    def test_composite_key_parts_skipped(self):
        metadata = TableMetadata(name="order_items", primary_key=["order_id", "item_no"])
        values = prepare_update_values(
            metadata, {"order_id": 10, "item_no": 1, "qty": 4}
        )
        assert values == {"qty": 4}


def test_key_values_from_row():
    """Test key values are picked from a loaded row; missing keys become None."""
    row = {"order_id": 10, "item_no": 2, "qty": 5}
    assert key_values_from_row(["order_id", "item_no"], row) == {
        "order_id": 10,
        "item_no": 2,
    }
    assert key_values_from_row(["id"], row) == {"id": None}
