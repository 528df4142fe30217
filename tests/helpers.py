"""Record types and factory functions shared by the test suite."""

from psycopg2 import sql

from tableaccess import Schema, TableBase


def render(composable) -> str:
    """Flatten composed SQL into text without a live connection."""
    if isinstance(composable, sql.Composed):
        return "".join(render(part) for part in composable.seq)
    if isinstance(composable, sql.SQL):
        return composable.string
    if isinstance(composable, sql.Identifier):
        return ".".join(f'"{s}"' for s in composable.strings)
    if isinstance(composable, sql.Placeholder):
        return f"%({composable.name})s" if composable.name else "%s"
    raise TypeError(f"Cannot render {composable!r}")


test_schema = Schema()


class User(TableBase):
    table_name = "users"
    columns = ("name", "age", "email")
    schema = test_schema

    def __init__(self, id, name, age, email=None):
        super().__init__(id)
        self.name = name
        self.age = age
        self.email = email

    @classmethod
    def from_record(cls, record):
        return cls(record["id"], record["name"], int(record["age"]), record.get("email"))

    @property
    def json(self):
        data = super().json
        data.update(name=self.name, age=self.age, email=self.email)
        return data


class Order(TableBase):
    table_name = "orders"
    columns = ("user_id", "total")
    schema = test_schema

    def __init__(self, id, user_id, total):
        super().__init__(id)
        self.user_id = user_id
        self.total = total

    @classmethod
    def from_record(cls, record):
        return cls(record["id"], record["user_id"], record["total"])


def make_user_row(**kwargs):
    defaults = {"id": 1, "name": "Alice", "age": 30, "email": "alice@example.com"}
    defaults.update(kwargs)
    return defaults
