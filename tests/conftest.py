"""
Shared fixtures: a stand-in for the psycopg2 connection pool.

The fake pool hands out connections whose cursors ask a `responder`
for the rows of every executed statement. Tests either queue canned
responses or plug in a responder that keeps its own state.
"""
from collections import deque

import pytest

from db import connection


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rows = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.pool.executed.append((sql, params))
        result = self.conn.pool.responder(sql, params)
        if isinstance(result, Exception):
            raise result
        self.rows = list(result or [])
        self.rowcount = len(self.rows)

    def fetchall(self):
        return self.rows

    def fetchone(self):
        return self.rows[0] if self.rows else None


class FakeConnection:
    def __init__(self, pool):
        self.pool = pool
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


class FakePool:
    def __init__(self):
        self.queue = deque()
        self.executed = []
        self.connections = []
        self.checked_out = 0
        self.closed = False
        self.responder = self._from_queue

    def _from_queue(self, sql, params):
        return self.queue.popleft() if self.queue else []

    def respond(self, *results):
        """Queue rows (a list of tuples) or an exception per statement."""
        self.queue.extend(results)

    def getconn(self):
        conn = FakeConnection(self)
        self.connections.append(conn)
        self.checked_out += 1
        return conn

    def putconn(self, conn):
        self.checked_out -= 1

    def closeall(self):
        self.closed = True

    @property
    def commits(self):
        return sum(c.commits for c in self.connections)

    @property
    def rollbacks(self):
        return sum(c.rollbacks for c in self.connections)


class RoundEntryTable:
    """Minimal stateful `roundentry` with the unique (user_id, round_id) pair."""

    def __init__(self):
        self.rows = []

    def __call__(self, sql, params):
        if "INSERT INTO roundentry" in sql:
            authtoken, roundticket, watchtoken, user_id, round_id, aeskey = params
            if any(r["user_id"] == user_id and r["round_id"] == round_id for r in self.rows):
                return []
            self.rows.append({
                "id": len(self.rows) + 1,
                "user_id": user_id,
                "round_id": round_id,
                "authtoken": authtoken,
                "roundticket": roundticket,
                "watchtoken": watchtoken,
                "aeskey": aeskey,
            })
            return [(len(self.rows),)]
        if "SELECT user_id FROM roundentry" in sql:
            (round_id,) = params
            return [(r["user_id"],) for r in self.rows if r["round_id"] == round_id]
        raise AssertionError(f"unexpected statement: {sql}")


@pytest.fixture
def fake_pool(monkeypatch):
    pool = FakePool()
    monkeypatch.setattr(connection, "_pool", pool)
    return pool


@pytest.fixture
def roundentry_table(fake_pool):
    table = RoundEntryTable()
    fake_pool.responder = table
    return table
