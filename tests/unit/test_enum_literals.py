"""Unit Tests for the enum declaration parser"""

import pytest

from db_crud_mcp.utils.enum_literals import parse_enum_literals


class TestParseEnumLiterals:
    """Test parsing of enum('A','B',...) declarations."""

    def test_simple_declaration(self):
        """Test literals come back in declaration order."""
        assert parse_enum_literals("enum('new','paid','shipped')") == [
            "new",
            "paid",
            "shipped",
        ]

    def test_comma_and_escaped_quote(self):
        """Test commas inside quotes are content and '' unescapes to one quote."""
        assert parse_enum_literals("enum('a','b,c','d''d')") == ["a", "b,c", "d'd"]

    def test_quote_at_literal_edges(self):
        """Test escaped quotes at the start and end of a literal."""
        assert parse_enum_literals("enum('''x''','y')") == ["'x'", "y"]

    def test_whitespace_between_literals(self):
        """Test whitespace outside quotes is ignored."""
        assert parse_enum_literals("ENUM( 'a' , 'b' )") == ["a", "b"]

    def test_spaces_inside_literal_preserved(self):
        """Test whitespace inside quotes is kept."""
        assert parse_enum_literals("enum(' padded ','x')") == [" padded ", "x"]

    def test_backslash_is_plain_content(self):
        """Test backslashes are not escape characters."""
        assert parse_enum_literals("enum('a\\b','c\\\\')") == ["a\\b", "c\\\\"]

    def test_single_literal(self):
        """Test a one-value enum."""
        assert parse_enum_literals("enum('only')") == ["only"]

    @pytest.mark.parametrize(
        "declaration",
        ["enum", "", None, "enum)(", "enum('a'", "enum()", "varchar"],
    )
    def test_malformed_returns_empty(self, declaration):
        """Test malformed declarations yield an empty list instead of raising."""
        assert parse_enum_literals(declaration) == []
