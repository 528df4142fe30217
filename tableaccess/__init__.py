"""Generic CRUD over single database tables through one shared connection pool."""

from .config import DatabaseConfig
from .connection import Database, PoolState, get_cursor, get_database, initialize, shutdown
from .errors import (
    AlreadyInitializedError,
    ConfigurationError,
    ConnectionClosedError,
    IntegrityViolationError,
    MappingError,
    NotConfiguredError,
    QueryBuildError,
    StaleRecordError,
    TableAccessError,
    UnknownIdentifierError,
)
from .schema import Schema, default_schema
from .table import TableBase

__all__ = [
    "AlreadyInitializedError",
    "ConfigurationError",
    "ConnectionClosedError",
    "Database",
    "DatabaseConfig",
    "IntegrityViolationError",
    "MappingError",
    "NotConfiguredError",
    "PoolState",
    "QueryBuildError",
    "Schema",
    "StaleRecordError",
    "TableAccessError",
    "TableBase",
    "UnknownIdentifierError",
    "default_schema",
    "get_cursor",
    "get_database",
    "initialize",
    "shutdown",
]
