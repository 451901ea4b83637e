"""
SQLAlchemy implementation of the transaction manager for Flask.

The active transaction travels in a :class:`contextvars.ContextVar`, so it is
private to the calling thread or asyncio task and nested calls find it without
any explicit parameter passing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from flask import Flask
from sqlalchemy.orm import Session

from catetin.core.extensions import db
from catetin.uow.base import NoActiveTransactionError, Transaction, TransactionManager

log = logging.getLogger(__name__)

_active_transaction: ContextVar[Transaction | None] = ContextVar(
    "catetin_active_transaction", default=None
)


def _flask_session() -> Session:
    return db.session()


class SQLAlchemyTransactionManager(TransactionManager):
    """
    Transaction manager backed by the Flask-scoped SQLAlchemy session.

    Parameters
    ----------
    session_factory:
        Returns the session a new transaction should run on. Defaults to the
        session scoped to the current application context.

    Notes
    -----
    No savepoints are used: a nested ``transaction()`` joins the outer one,
    and only the outermost scope commits or rolls back.
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or _flask_session

    # ----------------------------- Scoped API ---------------------------------

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        active = _active_transaction.get()
        if active is not None:
            yield active
            return

        txn = Transaction(session=self._session_factory())
        token = _active_transaction.set(txn)
        log.debug("tx.begin %r", txn)
        try:
            yield txn
        except BaseException:
            # Covers KeyboardInterrupt and generator close as well as errors
            self._rollback(txn)
            raise
        else:
            try:
                txn.session.commit()
            except BaseException:
                self._rollback(txn)
                raise
            log.debug("tx.commit %r", txn)
        finally:
            _active_transaction.reset(token)

    # ----------------------------- Manual API ---------------------------------

    def begin(self) -> Transaction:
        """Bind a new transaction, or return the one already bound."""
        active = _active_transaction.get()
        if active is not None:
            return active
        txn = Transaction(session=self._session_factory())
        _active_transaction.set(txn)
        log.debug("tx.begin %r (manual)", txn)
        return txn

    def commit(self) -> None:
        """Commit the bound transaction and unbind it.

        :raises NoActiveTransactionError: If nothing is bound.
        """
        txn = self._require_active("commit")
        try:
            txn.session.commit()
        except BaseException:
            self._rollback(txn)
            raise
        finally:
            _active_transaction.set(None)
        log.debug("tx.commit %r (manual)", txn)

    def rollback(self) -> None:
        """Roll back the bound transaction and unbind it.

        :raises NoActiveTransactionError: If nothing is bound.
        """
        txn = self._require_active("rollback")
        try:
            self._rollback(txn)
        finally:
            _active_transaction.set(None)

    # ----------------------------- Introspection ------------------------------

    def current(self) -> Transaction | None:
        return _active_transaction.get()

    @property
    def session(self) -> Session:
        """Session of the bound transaction, else the ambient session."""
        active = _active_transaction.get()
        return active.session if active is not None else self._session_factory()

    # ----------------------------- Internals ----------------------------------

    def _require_active(self, action: str) -> Transaction:
        txn = _active_transaction.get()
        if txn is None:
            raise NoActiveTransactionError(f"no active transaction to {action}")
        return txn

    @staticmethod
    def _rollback(txn: Transaction) -> None:
        txn.session.rollback()
        log.debug("tx.rollback %r", txn)


def discard_leaked_transaction(_exc: BaseException | None = None) -> None:
    """
    Roll back and unbind a manual transaction still bound when its application
    context ends.

    Worker threads serve many requests; a ``begin()`` that was never committed
    or rolled back must not reach the next one.
    """
    txn = _active_transaction.get()
    if txn is None:
        return
    log.warning("tx.leaked %r: rolled back at app context teardown", txn)
    try:
        txn.session.rollback()
    finally:
        _active_transaction.set(None)


def init_app(app: Flask) -> None:
    """Register the leaked-transaction guard on ``app``."""
    app.teardown_appcontext(discard_leaked_transaction)
