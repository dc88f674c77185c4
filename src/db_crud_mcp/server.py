"""Table editor MCP Server

A Model Context Protocol (MCP) server exposing generic table browsing and
row editing (insert/update/delete by primary key) for PostgreSQL, MySQL and
SQLite databases.
"""

import asyncio
import logging
import os
import sys
from typing import Any, Awaitable, Callable, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from db_crud_mcp.adapters import create_adapter
from db_crud_mcp.core import (
    DatabaseConnection,
    MetadataInspector,
    QueryExecutor,
    RowEditor,
)
from db_crud_mcp.core.forms import (
    enum_choices,
    prepare_insert_values,
    prepare_update_values,
)
from db_crud_mcp.exceptions import ConfigurationError
from db_crud_mcp.models.config import DatabaseConfig, load_config
from db_crud_mcp.utils import convert_rows_to_json_safe, dumps, to_csv

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Response size limits (in characters) for MCP tool responses
MAX_RESPONSE_LIST_TABLES = 5000
MAX_RESPONSE_DESCRIBE_TABLE = 8000
MAX_RESPONSE_REFERENCE_VALUES = 5000
MAX_RESPONSE_MUTATION = 2000
MAX_RESPONSE_LOAD_TABLE = 10000
MAX_RESPONSE_EXPORT_CSV = 20000

DEFAULT_ROW_LIMIT = 200

ToolHandler = Callable[[dict[str, Any]], Awaitable[list[TextContent]]]


def truncate_json_response(data: str, max_length: int) -> str:
    """
    Truncate a response to a maximum length, adding a truncation notice.

    Args:
        data: Response text to truncate
        max_length: Maximum length in characters

    Returns:
        Truncated text with truncation notice if needed
    """
    if len(data) <= max_length:
        return data

    truncation_msg = f"\n\n... [Response truncated: {len(data)} chars -> {max_length} chars]"
    available_length = max_length - len(truncation_msg)

    if available_length < 100:
        return dumps(
            {
                "error": "Response too large",
                "original_size": len(data),
                "limit": max_length,
                "message": "Response exceeds size limit. Use a smaller row limit.",
            }
        )

    truncated = data[:available_length]

    # Only cut at a newline if it's in the last 20%
    last_newline = truncated.rfind("\n")
    if last_newline > available_length * 0.8:
        truncated = truncated[:last_newline]

    return truncated + truncation_msg


def _text(payload: str, max_length: int) -> list[TextContent]:
    return [TextContent(type="text", text=truncate_json_response(payload, max_length))]


def _table_property() -> dict[str, Any]:
    return {"type": "string", "description": "Table name"}


class DatabaseMCPServer:
    """MCP server for browsing and editing table rows."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize table editor MCP server.

        Args:
            config: Database configuration
        """
        self.config = config
        self.connection = DatabaseConnection(config)
        self.adapter = create_adapter(config)
        self.inspector: Optional[MetadataInspector] = None
        self.executor: Optional[QueryExecutor] = None
        self.editor: Optional[RowEditor] = None
        self.server = Server("db-crud-mcp")

    async def initialize(self) -> None:
        """Initialize all components."""
        await self.connection.initialize()

        self.inspector = MetadataInspector(self.connection, self.adapter)
        self.executor = QueryExecutor(self.connection)
        self.editor = RowEditor(self.connection)

        logger.info(
            f"Initialized {self.config.dialect} table editor "
            f"({len(self.adapter.capabilities.get_supported_features())} features, "
            f"read_only={self.config.read_only})"
        )

    def get_tools(self) -> list[Tool]:
        """List available tools; mutation tools are omitted when read-only."""
        tools = [
            Tool(
                name="list_tables",
                description="List all tables in the database, sorted by name",
                inputSchema={"type": "object", "properties": {}, "required": []},
            ),
            Tool(
                name="describe_table",
                description=(
                    "Get a table's editing contract: primary key, auto-generated "
                    "columns, foreign key references and enum choices"
                ),
                inputSchema={
                    "type": "object",
                    "properties": {"table": _table_property()},
                    "required": ["table"],
                },
            ),
            Tool(
                name="load_table",
                description="Load up to `limit` rows of a table (SELECT *)",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "table": _table_property(),
                        "limit": {
                            "type": "integer",
                            "description": "Maximum rows to return (default: 200)",
                            "default": DEFAULT_ROW_LIMIT,
                            "minimum": 0,
                        },
                    },
                    "required": ["table"],
                },
            ),
            Tool(
                name="get_reference_values",
                description=(
                    "List the values of a referenced column, sorted, "
                    "to choose a foreign key value from"
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "table": _table_property(),
                        "column": {"type": "string", "description": "Column name"},
                    },
                    "required": ["table", "column"],
                },
            ),
            Tool(
                name="export_csv",
                description="Export up to `limit` rows of a table as CSV text",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "table": _table_property(),
                        "limit": {
                            "type": "integer",
                            "description": "Maximum rows to export (default: 200)",
                            "default": DEFAULT_ROW_LIMIT,
                            "minimum": 0,
                        },
                    },
                    "required": ["table"],
                },
            ),
        ]

        if self.config.read_only:
            return tools

        tools.extend(
            [
                Tool(
                    name="insert_row",
                    description=(
                        "Insert a row. Auto-generated columns and blank values "
                        "are left to the database"
                    ),
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "table": _table_property(),
                            "values": {
                                "type": "object",
                                "description": "Column -> value",
                            },
                        },
                        "required": ["table", "values"],
                    },
                ),
                Tool(
                    name="update_row",
                    description=(
                        "Update the row identified by its primary key. Key and "
                        "auto-generated columns are not changed; blank values set NULL"
                    ),
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "table": _table_property(),
                            "values": {
                                "type": "object",
                                "description": "Column -> new value",
                            },
                            "key_values": {
                                "type": "object",
                                "description": "Primary key column -> current value",
                            },
                        },
                        "required": ["table", "values", "key_values"],
                    },
                ),
                Tool(
                    name="delete_row",
                    description="Delete the row identified by its primary key",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "table": _table_property(),
                            "key_values": {
                                "type": "object",
                                "description": "Primary key column -> value",
                            },
                        },
                        "required": ["table", "key_values"],
                    },
                ),
            ]
        )
        return tools

    @property
    def handlers(self) -> dict[str, ToolHandler]:
        """Tool name -> handler coroutine."""
        return {
            "list_tables": self.handle_list_tables,
            "describe_table": self.handle_describe_table,
            "load_table": self.handle_load_table,
            "get_reference_values": self.handle_get_reference_values,
            "export_csv": self.handle_export_csv,
            "insert_row": self.handle_insert_row,
            "update_row": self.handle_update_row,
            "delete_row": self.handle_delete_row,
        }

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Dispatch a tool call by name."""
        handler = self.handlers.get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")
        return await handler(arguments)

    # Tool handlers
    async def handle_list_tables(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle list_tables request."""
        assert self.inspector is not None

        tables = await self.inspector.list_tables()
        return _text(dumps(tables), MAX_RESPONSE_LIST_TABLES)

    async def handle_describe_table(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle describe_table request."""
        assert self.inspector is not None

        metadata = await self.inspector.describe_table(arguments["table"])

        data = metadata.model_dump()
        data["enum_choices"] = {
            column: enum_choices(constraint)
            for column, constraint in metadata.enums.items()
        }
        data["updatable"] = metadata.has_primary_key
        return _text(dumps(data), MAX_RESPONSE_DESCRIBE_TABLE)

    async def handle_load_table(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle load_table request."""
        assert self.executor is not None

        table = arguments["table"]
        limit = arguments.get("limit", DEFAULT_ROW_LIMIT)

        data = await self.executor.load_table(table, limit)

        response = dumps(
            {
                "table": data.table,
                "columns": data.columns,
                "rows": convert_rows_to_json_safe(data.rows),
                "row_count": data.row_count,
                "truncated": data.truncated,
            }
        )
        return _text(response, MAX_RESPONSE_LOAD_TABLE)

    async def handle_get_reference_values(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle get_reference_values request."""
        assert self.executor is not None

        values = await self.executor.get_reference_values(
            arguments["table"], arguments["column"]
        )
        return _text(dumps(values), MAX_RESPONSE_REFERENCE_VALUES)

    async def handle_export_csv(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle export_csv request."""
        assert self.executor is not None

        table = arguments["table"]
        limit = arguments.get("limit", DEFAULT_ROW_LIMIT)

        data = await self.executor.load_table(table, limit)
        return _text(to_csv(data.columns, data.rows), MAX_RESPONSE_EXPORT_CSV)

    async def handle_insert_row(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle insert_row request."""
        assert self.inspector is not None and self.editor is not None

        table = arguments["table"]
        metadata = await self.inspector.describe_table(table)
        values = prepare_insert_values(metadata, arguments.get("values") or {})

        result = await self.editor.insert_row(table, values)
        return _text(dumps(result.model_dump()), MAX_RESPONSE_MUTATION)

    async def handle_update_row(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle update_row request."""
        assert self.inspector is not None and self.editor is not None

        table = arguments["table"]
        metadata = await self.inspector.describe_table(table)
        values = prepare_update_values(metadata, arguments.get("values") or {})

        result = await self.editor.update_row(
            table, metadata.primary_key, values, arguments.get("key_values") or {}
        )
        return _text(dumps(result.model_dump()), MAX_RESPONSE_MUTATION)

    async def handle_delete_row(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle delete_row request."""
        assert self.inspector is not None and self.editor is not None

        table = arguments["table"]
        key_columns = await self.inspector.get_primary_key_columns(table)

        result = await self.editor.delete_row(
            table, key_columns, arguments.get("key_values") or {}
        )
        return _text(dumps(result.model_dump()), MAX_RESPONSE_MUTATION)

    async def cleanup(self) -> None:
        """Cleanup resources."""
        await self.connection.dispose()
        logger.info("Table editor MCP server cleaned up")


async def main(config: Optional[DatabaseConfig] = None) -> None:
    """Main entry point for the MCP server."""
    # Configuration is loaded before anything else; failure aborts start-up
    if config is None:
        config = load_config(os.getenv("DB_CRUD_ENV_FILE"))

    mcp_server = DatabaseMCPServer(config)

    try:
        await mcp_server.initialize()

        @mcp_server.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return mcp_server.get_tools()

        @mcp_server.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await mcp_server.call_tool(name, arguments)

        # Run the server
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )

    finally:
        await mcp_server.cleanup()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'db-crud-mcp' console script.
    It loads configuration, sets up the event loop and runs main().
    """
    try:
        config = load_config(os.getenv("DB_CRUD_ENV_FILE"))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)

    # Windows-specific event loop policy
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
