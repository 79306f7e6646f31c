"""
db/query.py
-----------
Thin helpers for running parameterized SQL against the pool.
Each helper borrows one connection and always hands it back.

Errors from psycopg2 are not caught here beyond rolling back writes;
the repositories decide how a failure is reported.
"""

from typing import Any, Callable, Optional, Sequence, TypeVar

from db.connection import pooled_connection

T = TypeVar("T")


def select_range(sql: str, params: Sequence[Any], map_row: Callable[[tuple], T]) -> list[T]:
    """
    Run a SELECT and map every result row.

    Args:
        sql: Query with %s placeholders.
        params: Values bound to the placeholders, in order.
        map_row: Called once per row tuple; its return values are collected.

    Returns:
        The mapped rows, in the order the database returned them.
    """
    with pooled_connection() as conn, conn.cursor() as cur:
        cur.execute(sql, tuple(params))
        return [map_row(row) for row in cur.fetchall()]


def exists(sql: str, params: Sequence[Any]) -> bool:
    """True if the query yields at least one row."""
    with pooled_connection() as conn, conn.cursor() as cur:
        cur.execute(sql, tuple(params))
        return cur.fetchone() is not None


def execute_returning(sql: str, params: Sequence[Any]) -> Optional[tuple]:
    """
    Run a statement with a RETURNING clause and commit.

    Returns:
        The first returned row, or None when the statement touched
        nothing (e.g. ``ON CONFLICT DO NOTHING``).
    """
    with pooled_connection() as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(sql, tuple(params))
                row = cur.fetchone()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        return row
