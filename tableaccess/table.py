"""Base class for records backed by a single database table.

A concrete table type sets ``table_name`` and ``columns`` and implements
``from_record``:

    class User(TableBase):
        table_name = "users"
        columns = ("name", "age")

        def __init__(self, id, name, age):
            super().__init__(id)
            self.name = name
            self.age = age

        @classmethod
        def from_record(cls, record):
            return cls(record["id"], record["name"], record["age"])

Declaring ``columns`` registers the table in the identifier allow-list.

Table and column names are emitted quoted, so they are matched exactly as
written: ``table_name = "Users"`` targets a table created as ``"Users"``, not
the ``users`` PostgreSQL folds an unquoted ``Users`` to. Use the lowercase
name for tables created without quotes, as ``Schema.reflect`` reports them.
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from . import query
from .connection import Database, get_database
from .errors import (
    IntegrityViolationError,
    MappingError,
    QueryBuildError,
    StaleRecordError,
    TableAccessError,
)
from .schema import Schema, default_schema

logger = logging.getLogger(__name__)


class TableBase(ABC):
    table_name: Optional[str] = None
    columns: ClassVar[tuple] = ()
    # None means the process-wide default Database
    database: ClassVar[Optional[Database]] = None
    schema: ClassVar[Schema] = default_schema

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.table_name and cls.columns:
            cls.schema.register(cls.table_name, cls.columns)

    def __init__(self, id: int, table_name: Optional[str] = None):
        self._id = id
        if table_name:
            self.table_name = table_name
        if not self.table_name:
            raise QueryBuildError(f"{type(self).__name__} has no table_name")
        self._deleted = False

    @property
    def id(self) -> int:
        return self._id

    @property
    def json(self) -> dict:
        """Serializable view of this record. Subclasses extend it."""
        return {"id": self._id}

    def __repr__(self):
        return f"<{type(self).__name__} {self.table_name} id={self._id}>"

    # --- Plumbing ---

    @classmethod
    def _db(cls) -> Database:
        return cls.database or get_database()

    @classmethod
    def _resolve_table(cls, table_name):
        name = table_name or cls.table_name
        if not name:
            raise QueryBuildError(f"{cls.__name__} has no table_name")
        return name

    @classmethod
    def _run(cls, q, fetch=None):
        with cls._db().get_cursor() as cur:
            cur.execute(q.statement, q.params)
            if fetch == "all":
                return cur.fetchall()
            if fetch == "one":
                return cur.fetchone()
            return cur.rowcount

    def _check_live(self):
        if self._deleted:
            raise StaleRecordError(f"{self!r} was deleted")

    # --- Instance operations ---

    def delete(self) -> int:
        """Delete this row. The instance is stale afterwards."""
        self._check_live()
        q = query.delete(self.table_name, self._id, schema=self.schema)
        logger.debug("DELETE %s id=%s", self.table_name, self._id)
        count = self._run(q)
        self._deleted = True
        return count

    def update(self, fields: dict) -> int:
        """Set the given columns on this row. Returns the affected row count."""
        self._check_live()
        q = query.update(self.table_name, self._id, fields, schema=self.schema)
        logger.debug("UPDATE %s id=%s columns=%s", self.table_name, self._id, list(fields))
        return self._run(q)

    # --- Table operations ---

    @classmethod
    def insert(cls, fields: dict, table_name: Optional[str] = None) -> int:
        """Insert a row and return its generated id."""
        table = cls._resolve_table(table_name)
        q = query.insert(table, fields, schema=cls.schema)
        logger.debug("INSERT %s columns=%s", table, list(fields))
        row = cls._run(q, fetch="one")
        return row["id"]

    @classmethod
    def get_record_from_id(cls, id: int, table_name: Optional[str] = None) -> list:
        table = cls._resolve_table(table_name)
        return cls._run(query.select_by_id(table, id, schema=cls.schema), fetch="all")

    @classmethod
    def get_all_records(cls, table_name: Optional[str] = None, conditions: Optional[dict] = None) -> list:
        table = cls._resolve_table(table_name)
        return cls._run(query.select(table, conditions, schema=cls.schema), fetch="all")

    @classmethod
    @abstractmethod
    def from_record(cls, record: dict) -> "TableBase":
        """Build an instance from one raw row (a dict keyed by column name)."""
        raise NotImplementedError(f"{cls.__name__} must implement from_record()")

    @classmethod
    def map_record(cls, record: dict) -> "TableBase":
        """from_record(), with malformed-row failures raised as MappingError."""
        try:
            return cls.from_record(record)
        except TableAccessError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise MappingError(f"Cannot map row to {cls.__name__}: {e!r}") from e

    @classmethod
    def get_from_id(cls, id: int, table_name: Optional[str] = None):
        """Return the mapped record for ``id``, or None when no row matches."""
        table = cls._resolve_table(table_name)
        rows = cls.get_record_from_id(id, table)
        if not rows:
            return None
        if len(rows) > 1:
            raise IntegrityViolationError(table, id, len(rows))
        return cls.map_record(rows[0])

    @classmethod
    def get_all(cls, table_name: Optional[str] = None, conditions: Optional[dict] = None) -> list:
        """Return every matching row mapped, in result-set order."""
        return [cls.map_record(row) for row in cls.get_all_records(table_name, conditions)]
