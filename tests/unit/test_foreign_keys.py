"""Unit Tests for foreign key folding"""

from db_crud_mcp.core.inspector import fold_foreign_keys


def fk(constrained, table, referred):
    return {
        "constrained_columns": constrained,
        "referred_table": table,
        "referred_columns": referred,
    }


def test_single_column_keys():
    refs = fold_foreign_keys("orders", [fk(["customer_id"], "customers", ["id"])])
    assert list(refs) == ["customer_id"]
    assert refs["customer_id"].target == "customers.id"


def test_composite_key_split_by_position():
    """Test a composite key yields one reference per column pair."""
    refs = fold_foreign_keys(
        "shipments",
        [fk(["order_id", "item_no"], "order_items", ["order_id", "item_no"])],
    )
    assert refs["order_id"].target == "order_items.order_id"
    assert refs["item_no"].target == "order_items.item_no"


def test_last_reference_wins():
    """Test a column in several foreign keys keeps the last one reported."""
    refs = fold_foreign_keys(
        "orders",
        [
            fk(["customer_id"], "customers", ["id"]),
            fk(["customer_id"], "legacy_customers", ["code"]),
        ],
    )
    assert refs["customer_id"].referenced_table == "legacy_customers"
    assert refs["customer_id"].referenced_column == "code"


def test_no_foreign_keys():
    assert fold_foreign_keys("notes", []) == {}
