"""Tests for tableaccess/__main__.py."""

import logging
from unittest.mock import patch

import psycopg2
import pytest

from tableaccess import __main__ as cli
from tableaccess.connection import PoolState


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("tableaccess.__main__.setup_logging"):
        yield


class TestCheck:
    def test_success(self, mock_pool, db_env):
        _, pool, _, cursor = mock_pool
        cursor.fetchone.return_value = {"ok": 1}
        cli.main(["check"])
        cursor.execute.assert_called_once_with("SELECT 1 AS ok")
        pool.closeall.assert_called_once()

    def test_unexpected_result_exits(self, mock_pool, db_env):
        _, pool, _, cursor = mock_pool
        cursor.fetchone.return_value = None
        with pytest.raises(SystemExit) as exc:
            cli.main(["check"])
        assert exc.value.code == 1
        pool.closeall.assert_called_once()

    def test_query_error_exits(self, mock_pool, db_env):
        _, pool, _, cursor = mock_pool
        cursor.execute.side_effect = psycopg2.OperationalError("server closed")
        with pytest.raises(SystemExit) as exc:
            cli.main(["check"])
        assert exc.value.code == 1
        pool.closeall.assert_called_once()

    def test_missing_configuration_exits(self, mock_pool, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("PGDATABASE", raising=False)
        with pytest.raises(SystemExit) as exc:
            cli.main(["check"])
        assert exc.value.code == 1
        mock_pool[0].assert_not_called()


class TestTables:
    def test_prints_tables(self, mock_pool, db_env, capsys):
        _, _, _, cursor = mock_pool
        cursor.fetchall.return_value = [
            {"table_name": "users", "column_name": "id"},
            {"table_name": "users", "column_name": "name"},
        ]
        cli.main(["tables"])
        assert capsys.readouterr().out == "users: id, name\n"
        assert cursor.execute.call_args[0][1] == ("public",)


class TestHelpers:
    def test_check_connectivity(self, mock_pool):
        from tableaccess.config import DatabaseConfig
        from tableaccess.connection import Database
        _, _, _, cursor = mock_pool
        cursor.fetchone.return_value = {"ok": 1}
        db = Database()
        db.initialize(DatabaseConfig(dsn="postgresql://test"))
        assert db.state is PoolState.READY
        assert cli.check_connectivity(db) is True


class TestLoggingOptions:
    def test_defaults(self, mock_pool, db_env):
        mock_pool[3].fetchone.return_value = {"ok": 1}
        with patch("tableaccess.__main__.setup_logging") as mock_setup:
            cli.main(["check"])
        mock_setup.assert_called_once_with(level=logging.INFO, log_file=None)

    def test_verbose_and_log_file(self, mock_pool, db_env):
        mock_pool[3].fetchone.return_value = {"ok": 1}
        with patch("tableaccess.__main__.setup_logging") as mock_setup:
            cli.main(["-v", "--log-file", "logs/check.log", "check"])
        mock_setup.assert_called_once_with(level=logging.DEBUG, log_file="logs/check.log")
