"""Database configuration."""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError


@dataclass
class DatabaseConfig:
    """Connection settings for the shared pool.

    Either ``dsn`` or the discrete fields are used; when both are given
    the discrete fields override the matching DSN parts (libpq semantics).
    """

    host: Optional[str] = None
    port: int = 5432
    user: Optional[str] = None
    password: Optional[str] = None
    dbname: Optional[str] = None
    dsn: Optional[str] = None
    sslmode: Optional[str] = None
    connect_timeout: Optional[int] = None
    statement_timeout_ms: Optional[int] = None
    application_name: str = "tableaccess"
    min_connections: int = 1
    max_connections: int = 10
    # Seconds to wait for a free pooled connection; None waits indefinitely
    pool_timeout: Optional[float] = None

    def __post_init__(self):
        if self.min_connections < 0:
            raise ConfigurationError("min_connections must be >= 0")
        if self.max_connections < 1:
            raise ConfigurationError("max_connections must be >= 1")
        if self.pool_timeout is not None and self.pool_timeout < 0:
            raise ConfigurationError("pool_timeout must be >= 0")
        if self.min_connections > self.max_connections:
            raise ConfigurationError(
                f"min_connections ({self.min_connections}) exceeds "
                f"max_connections ({self.max_connections})"
            )

    @classmethod
    def from_env(cls, environ=None) -> "DatabaseConfig":
        """Build a config from DATABASE_URL, falling back to the PG* variables."""
        env = os.environ if environ is None else environ
        dsn = env.get("DATABASE_URL")
        dbname = env.get("PGDATABASE")
        if not dsn and not dbname:
            raise ConfigurationError("DATABASE_URL must be set (or PGDATABASE)")

        return cls(
            dsn=dsn,
            host=env.get("PGHOST"),
            port=_int_env(env, "PGPORT", 5432),
            user=env.get("PGUSER"),
            password=env.get("PGPASSWORD"),
            dbname=dbname,
            sslmode=env.get("PGSSLMODE"),
            connect_timeout=_int_env(env, "DB_CONNECT_TIMEOUT", None),
            statement_timeout_ms=_int_env(env, "DB_STATEMENT_TIMEOUT_MS", None),
            min_connections=_int_env(env, "DB_POOL_MIN", 1),
            max_connections=_int_env(env, "DB_POOL_MAX", 10),
            pool_timeout=_float_env(env, "DB_POOL_TIMEOUT"),
        )

    def connect_kwargs(self) -> dict:
        """Keyword arguments for psycopg2.connect / the connection pool."""
        kwargs = {}
        if self.dsn:
            kwargs["dsn"] = self.dsn
        for key in ("host", "user", "password", "dbname", "sslmode", "connect_timeout"):
            value = getattr(self, key)
            if value is not None:
                kwargs[key] = value
        if self.host is not None:
            kwargs["port"] = self.port
        if self.application_name:
            kwargs["application_name"] = self.application_name
        if self.statement_timeout_ms is not None:
            kwargs["options"] = f"-c statement_timeout={int(self.statement_timeout_ms)}"
        return kwargs


def _int_env(env, name, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(env, name):
    raw = env.get(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
