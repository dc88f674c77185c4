"""Exception hierarchy for the table editor core."""


class DbCrudError(Exception):
    """Base exception for db-crud-mcp."""


class ConfigurationError(DbCrudError):
    """Raised when start-up configuration is missing or unreadable."""


class DatabaseConnectionError(DbCrudError):
    """Raised when a database connection cannot be established."""


class QueryError(DbCrudError):
    """Raised when a statement fails to execute (syntax, constraint, transient)."""


class ValidationError(DbCrudError):
    """Raised for caller-fixable problems detected before any statement is sent."""
