"""Exception types raised by the table access layer.

Driver errors (psycopg2.Error and subclasses) are never wrapped; they
propagate to the caller unchanged.
"""


class TableAccessError(Exception):
    """Base class for all errors raised by tableaccess itself."""


class ConfigurationError(TableAccessError, ValueError):
    """Invalid configuration or connection used out of lifecycle order."""


class NotConfiguredError(ConfigurationError):
    """The shared connection pool was never initialized."""

    def __init__(self, message="Connection not configured"):
        super().__init__(message)


class AlreadyInitializedError(ConfigurationError):
    """initialize() called while a pool is already open."""

    def __init__(self, message="Connection already initialized; call shutdown() first"):
        super().__init__(message)


class ConnectionClosedError(ConfigurationError):
    """The shared connection pool has been shut down."""

    def __init__(self, message="Connection has been shut down"):
        super().__init__(message)


class QueryBuildError(TableAccessError, ValueError):
    """A statement could not be built from the supplied fields."""


class UnknownIdentifierError(QueryBuildError):
    """A table or column name is not in the schema allow-list."""


class IntegrityViolationError(TableAccessError):
    """More than one row came back for a single id."""

    def __init__(self, table_name, record_id, count):
        self.table_name = table_name
        self.record_id = record_id
        self.count = count
        super().__init__(f"{count} rows in {table_name} share id {record_id}")


class MappingError(TableAccessError):
    """A raw row could not be mapped onto a record type."""


class StaleRecordError(TableAccessError):
    """The record's row was deleted through this handle."""
