"""Tests for orjson serialization of loaded cell values."""

import datetime
import decimal
import ipaddress
import uuid

import orjson

from db_crud_mcp.utils.serialization import (
    convert_rows_to_json_safe,
    convert_value_to_json_safe,
    dumps,
)


class TestConvertValueToJsonSafe:
    """Test conversion of single cell values."""

    def test_native_types_unchanged(self):
        """Test values orjson handles natively pass through."""
        assert convert_value_to_json_safe(None) is None
        assert convert_value_to_json_safe("text") == "text"
        assert convert_value_to_json_safe(42) == 42
        assert convert_value_to_json_safe(True) is True

    def test_datetime_types_iso(self):
        """Test temporal values become ISO strings."""
        assert (
            convert_value_to_json_safe(datetime.datetime(2024, 1, 15, 10, 30))
            == "2024-01-15T10:30:00"
        )
        assert convert_value_to_json_safe(datetime.date(2024, 1, 15)) == "2024-01-15"
        assert convert_value_to_json_safe(datetime.time(10, 30)) == "10:30:00"

    def test_decimal_keeps_precision(self):
        """Test Decimal is emitted as exact text."""
        assert convert_value_to_json_safe(decimal.Decimal("19.990")) == "19.990"

    def test_timedelta_seconds(self):
        """Test timedelta becomes total seconds."""
        assert convert_value_to_json_safe(datetime.timedelta(minutes=2)) == 120.0

    def test_bytes(self):
        """Test UTF-8 bytes decode and binary bytes become base64."""
        assert convert_value_to_json_safe(b"abc") == "abc"
        assert convert_value_to_json_safe(b"\xff\xfe") == "//4="

    def test_uuid(self):
        """Test UUID is handled natively by orjson."""
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert convert_value_to_json_safe(value) == str(value)

    def test_unknown_type_falls_back_to_str(self):
        """Test types without a handler are stringified."""
        assert convert_value_to_json_safe(ipaddress.IPv4Address("10.0.0.1")) == "10.0.0.1"


class TestRowsAndDumps:
    """Test row conversion and dumps."""

    def test_rows_become_lists(self):
        """Test positional rows keep their order."""
        rows = [(1, decimal.Decimal("2.50"), None), (2, "x", b"y")]
        assert convert_rows_to_json_safe(rows) == [[1, "2.50", None], [2, "x", "y"]]

    def test_dumps_sets_sorted(self):
        """Test sets serialize as sorted lists."""
        assert orjson.loads(dumps({"auto": {"b", "a"}})) == {"auto": ["a", "b"]}

    def test_dumps_indented(self):
        """Test output is indented text."""
        assert dumps({"a": 1}) == '{\n  "a": 1\n}'
