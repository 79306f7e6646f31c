"""
Unit tests for the pool lifecycle and query helpers
"""
import psycopg2
import pytest

from db import connection, query
from db.connection import PoolNotInitializedError
from db.init_db import SCHEMA_SQL, create_tables


class TestConnectionPool:

    def test_get_connection_requires_pool(self, monkeypatch):
        monkeypatch.setattr(connection, "_pool", None)

        with pytest.raises(PoolNotInitializedError):
            connection.get_connection()

    def test_init_pool_is_idempotent(self, monkeypatch):
        created = []

        class Pool:
            def __init__(self, *args):
                created.append(args)

        monkeypatch.setattr(connection, "_pool", None)
        monkeypatch.setattr(connection.pool, "SimpleConnectionPool", Pool)

        connection.init_pool(1, 3)
        connection.init_pool(1, 3)

        assert len(created) == 1
        assert created[0][:2] == (1, 3)

    def test_init_pool_reraises_operational_error(self, monkeypatch):
        def refuse(*args):
            raise psycopg2.OperationalError("connection refused")

        monkeypatch.setattr(connection, "_pool", None)
        monkeypatch.setattr(connection.pool, "SimpleConnectionPool", refuse)

        with pytest.raises(psycopg2.OperationalError):
            connection.init_pool()
        assert connection._pool is None

    def test_pooled_connection_returns_connection(self, fake_pool):
        with connection.pooled_connection() as conn:
            assert fake_pool.checked_out == 1
            assert conn is fake_pool.connections[-1]
        assert fake_pool.checked_out == 0

    def test_pooled_connection_returns_connection_on_error(self, fake_pool):
        with pytest.raises(ValueError):
            with connection.pooled_connection():
                raise ValueError("boom")
        assert fake_pool.checked_out == 0

    def test_close_pool(self, fake_pool):
        connection.close_pool()

        assert fake_pool.closed is True
        assert connection._pool is None


class TestQueryHelpers:

    def test_select_range_maps_each_row(self, fake_pool):
        fake_pool.respond([(1, "a"), (2, "b")])

        names = query.select_range("SELECT id, name FROM t WHERE x = %s", [7], lambda r: r[1])

        assert names == ["a", "b"]
        assert fake_pool.executed == [("SELECT id, name FROM t WHERE x = %s", (7,))]
        assert fake_pool.checked_out == 0

    def test_select_range_releases_on_error(self, fake_pool):
        fake_pool.respond(psycopg2.OperationalError("gone"))

        with pytest.raises(psycopg2.OperationalError):
            query.select_range("SELECT 1", [], lambda r: r)
        assert fake_pool.checked_out == 0

    def test_exists(self, fake_pool):
        fake_pool.respond([(1,)], [])

        assert query.exists("SELECT id FROM round WHERE id = %s", [1]) is True
        assert query.exists("SELECT id FROM round WHERE id = %s", [2]) is False

    def test_execute_returning_rolls_back_on_error(self, fake_pool):
        fake_pool.respond(psycopg2.IntegrityError("dup"))

        with pytest.raises(psycopg2.IntegrityError):
            query.execute_returning("INSERT INTO t VALUES (%s) RETURNING id", [1])
        assert fake_pool.rollbacks == 1
        assert fake_pool.commits == 0
        assert fake_pool.checked_out == 0

    def test_execute_returning_without_row(self, fake_pool):
        fake_pool.respond([])

        assert query.execute_returning("INSERT ... RETURNING id", []) is None
        assert fake_pool.commits == 1


class TestSchema:

    def test_roundentry_pair_is_unique(self):
        assert "UNIQUE (user_id, round_id)" in SCHEMA_SQL

    def test_create_tables_runs_in_one_transaction(self, fake_pool):
        create_tables()

        assert fake_pool.executed == [(SCHEMA_SQL, None)]
        assert fake_pool.commits == 1

    def test_create_tables_rolls_back(self, fake_pool):
        fake_pool.respond(psycopg2.ProgrammingError("permission denied"))

        with pytest.raises(psycopg2.ProgrammingError):
            create_tables()
        assert fake_pool.rollbacks == 1
