"""
db/connection.py
----------------
Process-wide psycopg2 connection pool for the round store.
`init_pool()` runs once at startup; every query then borrows a
connection through `pooled_connection()` and hands it back on exit.
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import pool
from config import DATABASE_URL, DB_POOL_MIN, DB_POOL_MAX
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


class PoolNotInitializedError(RuntimeError):
    """A connection was requested before init_pool() succeeded."""


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Open the pool against DATABASE_URL. Calling it again is a no-op.

    Raises:
        psycopg2.OperationalError: The server refused or could not be reached.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, DATABASE_URL)
    except psycopg2.OperationalError as e:
        logger.error(f"Could not open pool ({min_conn}-{max_conn} connections): {e}")
        raise
    logger.info(f"Connection pool ready ({min_conn}-{max_conn} connections).")


def get_connection():
    """Take a connection out of the pool; pair with release_connection()."""
    if _pool is None:
        raise PoolNotInitializedError("connection pool not initialized, call init_pool() first")
    return _pool.getconn()


def release_connection(conn) -> None:
    if _pool is not None:
        _pool.putconn(conn)


@contextmanager
def pooled_connection() -> Iterator:
    """Borrow a connection for the duration of a `with` block."""
    conn = get_connection()
    try:
        yield conn
    finally:
        release_connection(conn)


def close_pool() -> None:
    """Close every pooled connection and forget the pool."""
    global _pool
    if _pool is None:
        return
    _pool.closeall()
    _pool = None
    logger.info("Connection pool closed.")
