"""
Store-level error taxonomy and the classifier that produces it.

Every failure leaving a repository is one of :class:`RecordNotFoundError`,
:class:`VersionConflictError`, :class:`DuplicateRecordError` or
:class:`UnknownStoreError`. Driver exceptions never cross the repository
boundary unclassified; the original stays reachable through ``__cause__``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

log = logging.getLogger(__name__)

# SQLSTATE for unique_violation (PostgreSQL, and psycopg exposes it as pgcode)
UNIQUE_VIOLATION_SQLSTATE = "23505"

_UNIQUE_MESSAGES = (
    "unique constraint failed",  # SQLite
    "duplicate key value violates unique constraint",  # PostgreSQL
    "duplicate entry",  # MySQL
)


class StoreError(Exception):
    """
    Base class for classified store failures.

    :param entity: Aggregate name (e.g. ``"User"``).
    :param key: Identifier or natural key involved, when known.
    """

    default_message = "store error"

    def __init__(self, entity: str, key: Any = None, message: str | None = None) -> None:
        self.entity = entity
        self.key = key
        super().__init__(message or self._describe())

    def _describe(self) -> str:
        suffix = f": {self.key}" if self.key is not None else ""
        return f"{self.entity} {self.default_message}{suffix}"


class RecordNotFoundError(StoreError):
    """No active row matches the lookup, or a delete touched zero rows."""

    default_message = "not found"


class VersionConflictError(StoreError):
    """A version-gated write touched zero rows.

    Raised regardless of the underlying cause (stale version, concurrent
    soft delete, or unknown id).
    """

    default_message = "version conflict"


class DuplicateRecordError(StoreError):
    """A natural-key unique index rejected the write."""

    default_message = "already exists"


class UnknownStoreError(StoreError):
    """Any other storage failure. Callers may retry; the store never does."""

    default_message = "storage failure"


def _driver_sqlstate(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    # psycopg3 -> sqlstate, psycopg2 -> pgcode
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    """Return ``True`` when ``exc`` is an integrity error from a unique index."""
    if not isinstance(exc, IntegrityError):
        return False
    if _driver_sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return any(violates(exc, marker) for marker in _UNIQUE_MESSAGES)


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether the driver message of an IntegrityError mentions
    ``constraint_name`` (case-insensitive).

    PostgreSQL includes the constraint name in the message; SQLite reports the
    column list instead.
    """
    message = str(exc.orig).lower() if exc.orig is not None else ""
    return constraint_name.lower() in message


def classify(exc: BaseException, *, entity: str, key: Any = None) -> StoreError:
    """Map a SQLAlchemy exception to the store taxonomy.

    :param exc: Exception raised by the driver or the ORM.
    :param entity: Aggregate name for the resulting error.
    :param key: Identifier or natural key involved, when known.
    :returns: A :class:`StoreError` subclass instance (not raised).
    """
    if isinstance(exc, StoreError):
        return exc
    if isinstance(exc, NoResultFound):
        return RecordNotFoundError(entity, key)
    if isinstance(exc, StaleDataError):
        return VersionConflictError(entity, key)
    if isinstance(exc, SQLAlchemyError) and is_unique_violation(exc):
        return DuplicateRecordError(entity, key)
    return UnknownStoreError(entity, key)


@contextmanager
def translate_store_errors(entity: str, key: Any = None) -> Iterator[None]:
    """Re-raise any SQLAlchemy failure inside the block as a classified error.

    Already classified :class:`StoreError` instances pass through untouched.
    """
    try:
        yield
    except StoreError:
        raise
    except SQLAlchemyError as exc:
        classified = classify(exc, entity=entity, key=key)
        if isinstance(classified, UnknownStoreError):
            log.error("store.unknown entity=%s key=%s", entity, key, exc_info=True)
        raise classified from exc
