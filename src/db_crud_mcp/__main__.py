"""Entry point for running db_crud_mcp as a module."""

from db_crud_mcp.server import cli_entry

if __name__ == "__main__":
    cli_entry()
