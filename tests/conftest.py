"""Pytest configuration and shared fixtures for table editor tests"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator, Optional

import pytest
from dotenv import load_dotenv
from sqlalchemy import text

from db_crud_mcp.adapters import create_adapter
from db_crud_mcp.adapters.base import BaseAdapter
from db_crud_mcp.core import (
    DatabaseConnection,
    MetadataInspector,
    QueryExecutor,
    RowEditor,
)
from db_crud_mcp.models.config import DatabaseConfig

# Load environment variables
load_dotenv()

# Fix for Windows: asyncpg requires SelectorEventLoop on Windows
if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]


SQLITE_SCHEMA = [
    """
    CREATE TABLE customers (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        city TEXT
    )
    """,
    """
    CREATE TABLE orders (
        id INTEGER PRIMARY KEY,
        customer_id INTEGER REFERENCES customers(id),
        note TEXT,
        amount REAL
    )
    """,
    # Physical column order differs from key order on purpose
    """
    CREATE TABLE order_items (
        qty INTEGER,
        item_no INTEGER NOT NULL,
        order_id INTEGER NOT NULL REFERENCES orders(id),
        PRIMARY KEY (order_id, item_no)
    )
    """,
    """
    CREATE TABLE audit_log (
        message TEXT,
        created TEXT
    )
    """,
    """
    CREATE TABLE notes (
        id INTEGER PRIMARY KEY,
        body TEXT,
        score REAL
    )
    """,
    """
    CREATE TABLE "weird table" (
        id INTEGER PRIMARY KEY,
        "col one" TEXT
    )
    """,
    "CREATE VIEW big_orders AS SELECT * FROM orders WHERE amount > 100",
]

SQLITE_SEED = [
    "INSERT INTO customers (id, name, city) VALUES (1, 'Ada', 'London')",
    "INSERT INTO customers (id, name, city) VALUES (2, 'Linus', 'Helsinki')",
    "INSERT INTO customers (id, name, city) VALUES (3, 'Grace', NULL)",
    "INSERT INTO customers (id, name, city) VALUES (4, 'Ada', 'Paris, France')",
    "INSERT INTO orders (id, customer_id, note, amount) VALUES (10, 1, 'first', 9.5)",
    "INSERT INTO orders (id, customer_id, note, amount) VALUES (11, 2, NULL, 120.0)",
    "INSERT INTO order_items (qty, item_no, order_id) VALUES (3, 1, 10)",
    "INSERT INTO order_items (qty, item_no, order_id) VALUES (5, 2, 10)",
    "INSERT INTO order_items (qty, item_no, order_id) VALUES (1, 1, 11)",
    "INSERT INTO audit_log (message, created) VALUES ('boot', '2024-01-15')",
    "INSERT INTO notes (id, body, score) VALUES (1, 'alpha', 1.5)",
    "INSERT INTO notes (id, body, score) VALUES (2, NULL, NULL)",
    """INSERT INTO "weird table" (id, "col one") VALUES (1, 'x')""",
]


# ==================== Configuration Fixtures ====================


@pytest.fixture(scope="session")
def pg_database_url() -> Optional[str]:
    """PostgreSQL test database URL from environment"""
    return os.getenv("PG_TEST_DATABASE_URL")


@pytest.fixture(scope="session")
def mysql_database_url() -> Optional[str]:
    """MySQL test database URL from environment"""
    return os.getenv("MYSQL_TEST_DATABASE_URL")


@pytest.fixture
def sqlite_path(tmp_path: Path) -> Path:
    """Path of a fresh SQLite database file"""
    return tmp_path / "editor.db"


@pytest.fixture
def sqlite_config(sqlite_path: Path) -> DatabaseConfig:
    """SQLite database configuration (async driver added by the validator)"""
    return DatabaseConfig(url=f"sqlite:///{sqlite_path}")


# ==================== SQLite Fixtures ====================


@pytest.fixture
def sqlite_adapter(sqlite_config: DatabaseConfig) -> BaseAdapter:
    """SQLite adapter instance"""
    return create_adapter(sqlite_config)


@pytest.fixture
async def sqlite_connection(
    sqlite_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """Seeded SQLite database connection with proper cleanup"""
    connection = DatabaseConnection(sqlite_config)
    await connection.initialize()
    try:
        async with connection.transaction() as conn:
            for statement in SQLITE_SCHEMA + SQLITE_SEED:
                await conn.execute(text(statement))
        yield connection
    finally:
        await connection.dispose()


@pytest.fixture
async def inspector(
    sqlite_connection: DatabaseConnection, sqlite_adapter: BaseAdapter
) -> MetadataInspector:
    """SQLite metadata inspector"""
    return MetadataInspector(sqlite_connection, sqlite_adapter)


@pytest.fixture
async def executor(sqlite_connection: DatabaseConnection) -> QueryExecutor:
    """SQLite query executor"""
    return QueryExecutor(sqlite_connection)


@pytest.fixture
async def editor(sqlite_connection: DatabaseConnection) -> RowEditor:
    """SQLite row editor"""
    return RowEditor(sqlite_connection)


# ==================== Server Database Fixtures ====================


@pytest.fixture
async def pg_config(pg_database_url: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_database_url:
        pytest.skip("PG_TEST_DATABASE_URL not set in environment")
    return DatabaseConfig(url=pg_database_url)


@pytest.fixture
async def mysql_config(mysql_database_url: Optional[str]) -> DatabaseConfig:
    """MySQL database configuration"""
    if not mysql_database_url:
        pytest.skip("MYSQL_TEST_DATABASE_URL not set in environment")
    return DatabaseConfig(url=mysql_database_url)


@pytest.fixture
async def pg_connection(
    pg_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    await connection.initialize()
    try:
        yield connection
    finally:
        await connection.dispose()


@pytest.fixture
async def mysql_connection(
    mysql_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """MySQL database connection with proper cleanup"""
    connection = DatabaseConnection(mysql_config)
    await connection.initialize()
    try:
        yield connection
    finally:
        await connection.dispose()


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line("markers", "mysql: MySQL-specific tests")
    config.addinivalue_line("markers", "sqlite: Tests on a temporary SQLite file")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
