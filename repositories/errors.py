"""
repositories/errors.py
-----------------------
Failure kinds surfaced by the repositories and the `Result` wrapper
their operations return.

Repositories never raise past their boundary: every failure is logged
where it is detected, classified into one of the errors below, and
handed back inside a `Result` whose `ok` flag is False.
"""

from dataclasses import dataclass
from typing import Generic, Iterator, Optional, TypeVar

import psycopg2

from db.connection import PoolNotInitializedError
from utils.crypto import SecretGenerationError

T = TypeVar("T")


class RepositoryError(Exception):
    """Base class for every repository failure."""

    kind = "repository_error"


class StoreUnavailableError(RepositoryError):
    """The database could not be reached or the connection broke."""

    kind = "store_unavailable"


class ConstraintViolationError(RepositoryError):
    """A statement was rejected by a schema constraint."""

    kind = "constraint_violation"


class QueryFailedError(RepositoryError):
    """Any other database-side failure (bad SQL, type errors, ...)."""

    kind = "query_failed"


class SecretIssueError(RepositoryError):
    """The secrets for a new round entry could not be generated."""

    kind = "secret_generation_failed"


def classify(exc: Exception) -> RepositoryError:
    """
    Map a raised exception to a RepositoryError.

    psycopg2 errors are sorted by their DB-API class; anything that is
    already a RepositoryError is returned unchanged. The original
    exception is kept as `__cause__`.
    """
    if isinstance(exc, RepositoryError):
        return exc
    if isinstance(exc, SecretGenerationError):
        err: RepositoryError = SecretIssueError(str(exc))
    elif isinstance(exc, (psycopg2.OperationalError, psycopg2.InterfaceError, PoolNotInitializedError)):
        err = StoreUnavailableError(str(exc))
    elif isinstance(exc, psycopg2.IntegrityError):
        err = ConstraintViolationError(str(exc))
    else:
        err = QueryFailedError(str(exc))
    err.__cause__ = exc
    return err


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a repository operation.

    Unpacks as ``value, ok`` so callers that only branch on success can
    write ``rounds, ok = repo.active_rounds()``. When `ok` is False the
    value carries no data and `error` says what went wrong.
    """
    value: Optional[T] = None
    error: Optional[RepositoryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator:
        yield self.value
        yield self.ok

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RepositoryError, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value, error=error)
