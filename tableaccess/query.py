"""Statement builders for single-table CRUD.

Identifiers go through the schema allow-list and psycopg2.sql.Identifier;
values only ever travel as named placeholders in ``Query.params``.
"""

from dataclasses import dataclass, field

from psycopg2 import sql

from .errors import QueryBuildError
from .schema import ID_COLUMN, default_schema


@dataclass
class Query:
    statement: sql.Composable
    params: dict = field(default_factory=dict)


def _assignments(columns, separator):
    """``a = %(a)s<sep>b = %(b)s`` for each column."""
    return sql.SQL(separator).join(
        sql.SQL("{} = {}").format(sql.Identifier(c), sql.Placeholder(c)) for c in columns
    )


def _require_fields(fields, operation):
    if not fields:
        raise QueryBuildError(f"{operation} requires at least one field")
    return list(fields)


def select(table, conditions=None, schema=None) -> Query:
    schema = schema or default_schema
    schema.check_table(table)
    statement = sql.SQL("SELECT * FROM {}").format(sql.Identifier(table))
    params = {}
    if conditions:
        columns = schema.check_columns(table, list(conditions))
        statement = sql.SQL("{} WHERE {}").format(statement, _assignments(columns, " AND "))
        params = {c: conditions[c] for c in columns}
    return Query(statement, params)


def select_by_id(table, record_id, schema=None) -> Query:
    schema = schema or default_schema
    schema.check_table(table)
    statement = sql.SQL("SELECT * FROM {} WHERE {} = {}").format(
        sql.Identifier(table), sql.Identifier(ID_COLUMN), sql.Placeholder(ID_COLUMN)
    )
    return Query(statement, {ID_COLUMN: record_id})


def insert(table, fields, schema=None) -> Query:
    schema = schema or default_schema
    columns = schema.check_columns(table, _require_fields(fields, "INSERT"))
    statement = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING {}").format(
        sql.Identifier(table),
        sql.SQL(", ").join(sql.Identifier(c) for c in columns),
        sql.SQL(", ").join(sql.Placeholder(c) for c in columns),
        sql.Identifier(ID_COLUMN),
    )
    return Query(statement, {c: fields[c] for c in columns})


def update(table, record_id, fields, schema=None) -> Query:
    schema = schema or default_schema
    columns = schema.check_columns(table, _require_fields(fields, "UPDATE"))
    if ID_COLUMN in columns:
        raise QueryBuildError("UPDATE cannot change the id column")
    statement = sql.SQL("UPDATE {} SET {} WHERE {} = {}").format(
        sql.Identifier(table),
        _assignments(columns, ", "),
        sql.Identifier(ID_COLUMN),
        sql.Placeholder(ID_COLUMN),
    )
    params = {c: fields[c] for c in columns}
    params[ID_COLUMN] = record_id
    return Query(statement, params)


def delete(table, record_id, schema=None) -> Query:
    schema = schema or default_schema
    schema.check_table(table)
    statement = sql.SQL("DELETE FROM {} WHERE {} = {}").format(
        sql.Identifier(table), sql.Identifier(ID_COLUMN), sql.Placeholder(ID_COLUMN)
    )
    return Query(statement, {ID_COLUMN: record_id})
