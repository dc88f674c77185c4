"""Database configuration model and start-up loader."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.engine.url import make_url

from db_crud_mcp.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Map common dialect variations to standard names
DIALECT_VARIATIONS = {
    # PostgreSQL variations
    "postgresql": "postgresql",
    "postgres": "postgresql",
    "psql": "postgresql",
    "pg": "postgresql",
    "pgsql": "postgresql",
    # MySQL variations
    "mysql": "mysql",
    "mariadb": "mysql",  # MariaDB is MySQL-compatible
    "maria": "mysql",
    # SQLite variations
    "sqlite": "sqlite",
    "sqlite3": "sqlite",
}

ASYNC_DRIVERS = {
    "postgresql": "asyncpg",
    "mysql": "aiomysql",
    "sqlite": "aiosqlite",
}


class DatabaseConfig(BaseModel):
    """Configuration for database connection and pooling."""

    url: str = Field(
        ...,
        description="Database connection URL (e.g., mysql://host:3306/db)",
    )
    username: Optional[str] = Field(
        default=None,
        description="Login principal; overrides any user embedded in the URL",
    )
    password: Optional[str] = Field(
        default=None,
        description="Login credential; overrides any password embedded in the URL",
    )
    pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Connection pool size",
    )
    max_overflow: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum overflow connections",
    )
    pool_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Pool checkout timeout in seconds",
    )
    read_only: bool = Field(
        default=False,
        description="Refuse insert/update/delete and open read-only sessions",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements to stdout",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate and normalize database URL format."""
        try:
            # JDBC is a Java-specific format, Python drivers don't use it
            if v.lower().startswith("jdbc:"):
                v = v[5:]
                logger.info(
                    "Converted JDBC URL to Python format (removed 'jdbc:' prefix)"
                )

            url = make_url(v)
            original_dialect = url.drivername.split("+")[0].lower()
            dialect = DIALECT_VARIATIONS.get(original_dialect)

            if not dialect:
                raise ValueError(
                    f"Unsupported database dialect: '{original_dialect}'. "
                    f"Supported: {', '.join(sorted(DIALECT_VARIATIONS))}"
                )

            driver_part = ""
            if "+" in url.drivername:
                driver_part = "+" + url.drivername.split("+")[1]
            else:
                driver_part = "+" + ASYNC_DRIVERS[dialect]
                logger.info(f"Automatically added async driver: {dialect}{driver_part}")

            if original_dialect != dialect:
                logger.info(
                    f"Normalized database dialect from '{original_dialect}' to '{dialect}'"
                )
            url = url.set(drivername=dialect + driver_part)

            # render_as_string keeps the password; str(url) masks it as ***
            return url.render_as_string(hide_password=False)
        except Exception as e:
            raise ValueError(f"Invalid database URL: {e}")

    @property
    def dialect(self) -> str:
        """Extract database dialect from URL."""
        return make_url(self.url).drivername.split("+")[0]

    @property
    def driver(self) -> str:
        """Extract driver name from URL."""
        parts = make_url(self.url).drivername.split("+")
        return parts[1] if len(parts) > 1 else ""

    @property
    def database(self) -> Optional[str]:
        """Extract database name from URL."""
        return make_url(self.url).database

    @property
    def connection_url(self) -> str:
        """URL handed to the engine, with configured credentials applied."""
        url = make_url(self.url)
        if self.username is not None:
            url = url.set(username=self.username)
        if self.password is not None:
            url = url.set(password=self.password)
        return url.render_as_string(hide_password=False)

    @property
    def sanitized_url(self) -> str:
        """Connection URL with the password masked, safe for logs."""
        return make_url(self.connection_url).render_as_string(hide_password=True)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "mysql://localhost:3306/shop",
                    "username": "editor",
                    "password": "secret",
                    "pool_size": 5,
                    "max_overflow": 10,
                    "read_only": False,
                }
            ]
        }
    }


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_config(env_file: Optional[Union[str, Path]] = None) -> DatabaseConfig:
    """
    Load the database configuration once at process start.

    Reads a ``.env`` file (the given one, or the default lookup when omitted)
    and then the process environment. Loading is all-or-nothing: any missing
    or invalid setting raises ConfigurationError and no partial config is
    returned.

    Args:
        env_file: Explicit path to a dotenv file; it must exist when given

    Returns:
        Validated database configuration

    Raises:
        ConfigurationError: If the configuration is missing or invalid
    """
    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        load_dotenv(path)
    else:
        load_dotenv()

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ConfigurationError("DATABASE_URL environment variable must be set")

    try:
        config = DatabaseConfig(
            url=database_url,
            username=os.getenv("DATABASE_USER"),
            password=os.getenv("DATABASE_PASSWORD"),
            read_only=_env_flag(os.getenv("DATABASE_READ_ONLY")),
        )
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid database configuration: {e}") from e

    logger.info(f"Loaded database configuration for {config.sanitized_url}")
    return config
