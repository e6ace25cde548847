from __future__ import annotations

from datetime import time, timedelta

import mysql.connector
import pytest

from ojt_attendance.database.connection import DBConfig, DatabaseConnection
from ojt_attendance.database.mysql_base import db_cursor, normalize_mysql_time


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cur = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.conn = FakeConnection()

    def connect(self):
        return self.conn


def test_config_defaults():
    config = DBConfig.from_dict({"host": "db", "port": "3307"})
    assert config == DBConfig(host="db", port=3307, user="root", password="", database="fragranza_ojt")


def test_connect_can_skip_database(monkeypatch):
    calls = []
    monkeypatch.setattr(mysql.connector, "connect", lambda **kw: calls.append(kw) or object())
    factory = DatabaseConnection(DBConfig.from_dict({"database": "ojt_test"}))

    factory.connect()
    factory.connect(with_database=False)

    assert calls[0]["database"] == "ojt_test"
    assert "database" not in calls[1]


def test_db_cursor_commits_and_closes():
    factory = FakeFactory()
    with db_cursor(factory) as (conn, cur):
        assert cur is factory.conn.cur
    assert factory.conn.committed and factory.conn.closed and cur.closed


def test_db_cursor_rolls_back_on_error():
    factory = FakeFactory()
    with pytest.raises(RuntimeError):
        with db_cursor(factory):
            raise RuntimeError("boom")
    assert factory.conn.rolled_back and not factory.conn.committed
    assert factory.conn.closed


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        (time(8, 30), time(8, 30)),
        (timedelta(hours=17, minutes=45), time(17, 45)),
        ("09:15", time(9, 15)),
    ],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected
