"""Allow-list of table and column names that may be interpolated into SQL.

Values are always bound as parameters; identifiers cannot be, so every
table or column name must be known here before it reaches a statement.
"""

import logging
import re

from .errors import UnknownIdentifierError

logger = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
ID_COLUMN = "id"


def check_identifier(name) -> str:
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise UnknownIdentifierError(f"Invalid SQL identifier: {name!r}")
    return name


class Schema:
    """Known tables and their columns."""

    def __init__(self, tables=None):
        self._tables = {}
        for table, columns in (tables or {}).items():
            self.register(table, columns)

    def register(self, table, columns) -> None:
        check_identifier(table)
        known = self._tables.setdefault(table, {ID_COLUMN})
        for column in columns:
            known.add(check_identifier(column))

    def tables(self) -> list[str]:
        return sorted(self._tables)

    def columns(self, table) -> list[str]:
        return sorted(self._tables[self.check_table(table)])

    def __contains__(self, table):
        return table in self._tables

    def check_table(self, table) -> str:
        check_identifier(table)
        if table not in self._tables:
            raise UnknownIdentifierError(f"Unknown table: {table!r}")
        return table

    def check_columns(self, table, columns) -> list[str]:
        known = self._tables[self.check_table(table)]
        checked = []
        for column in columns:
            check_identifier(column)
            if column not in known:
                raise UnknownIdentifierError(f"Unknown column {column!r} on table {table!r}")
            checked.append(column)
        return checked

    @classmethod
    def reflect(cls, database, schema_name="public") -> "Schema":
        """Build an allow-list from information_schema for one database schema."""
        with database.get_cursor() as cur:
            cur.execute("""
                SELECT table_name, column_name
                FROM information_schema.columns
                WHERE table_schema = %s
                ORDER BY table_name, ordinal_position
            """, (schema_name,))
            rows = cur.fetchall()

        tables = {}
        for row in rows:
            tables.setdefault(row["table_name"], []).append(row["column_name"])

        schema = cls()
        for table, columns in tables.items():
            # Quoted mixed-case or spaced names stay out of the allow-list
            if not IDENTIFIER_RE.match(table):
                logger.warning("Skipping table %r: not a plain identifier", table)
                continue
            schema.register(table, [c for c in columns if IDENTIFIER_RE.match(c)])
        logger.info("Reflected %d tables from schema %s", len(schema.tables()), schema_name)
        return schema


default_schema = Schema()
