"""Operator checks: python -m tableaccess {check,tables}"""

import argparse
import logging
import sys

import psycopg2

from .config import DatabaseConfig
from .connection import Database
from .errors import ConfigurationError
from .log_config import setup_logging
from .schema import Schema

logger = logging.getLogger("tableaccess.cli")


def check_connectivity(database) -> bool:
    """Run a trivial query through the pool."""
    with database.get_cursor() as cur:
        cur.execute("SELECT 1 AS ok")
        row = cur.fetchone()
    return bool(row and row["ok"] == 1)


def list_tables(database, schema_name="public"):
    schema = Schema.reflect(database, schema_name)
    for table in schema.tables():
        print(f"{table}: {', '.join(schema.columns(table))}")
    return schema


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Check database connectivity and schema")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--log-file", help="Also write logs to this file (rotated at 5 MB)")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("check", help="Open the pool and run SELECT 1")
    tables = sub.add_parser("tables", help="List tables and columns")
    tables.add_argument("--schema", default="public")

    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    database = Database()
    try:
        database.initialize(DatabaseConfig.from_env())
    except (ConfigurationError, psycopg2.Error) as e:
        logger.error("Could not open connection pool: %s", e)
        sys.exit(1)

    try:
        if args.command == "check":
            if not check_connectivity(database):
                logger.error("Connectivity check returned an unexpected result")
                sys.exit(1)
            logger.info("Database reachable")
        else:
            list_tables(database, args.schema)
    except psycopg2.Error as e:
        logger.error("%s failed: %s", args.command, e)
        sys.exit(1)
    finally:
        database.shutdown()


if __name__ == "__main__":
    main()
