"""
Abstract transaction-manager contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class NoActiveTransactionError(RuntimeError):
    """``commit()`` or ``rollback()`` was called with nothing bound to the context.

    This is a programming error, never a domain outcome.
    """


@dataclass(slots=True, eq=False)
class Transaction:
    """
    Handle bound to the current execution context while a transaction is open.

    :param session: Session every store operation in the scope runs against.
    :type session: sqlalchemy.orm.Session
    """

    session: Session

    def __repr__(self) -> str:
        return f"<Transaction session={id(self.session):#x}>"


class TransactionManager(ABC):
    """
    Coordinates a transactional boundary for a use-case.

    Responsibilities:
    - Bind one transaction to the calling context and reuse it when nested.
    - Commit on success, roll back on any error (including interruption).
    - Expose the session store operations must use right now.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[Transaction]: ...

    def run_in_transaction(self, fn: Callable[[Transaction], T]) -> T:
        """Run ``fn`` inside :meth:`transaction` and return its result.

        When a transaction is already bound ``fn`` joins it and the outermost
        caller decides the outcome.
        """
        with self.transaction() as txn:
            return fn(txn)

    @abstractmethod
    def begin(self) -> Transaction: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
    @abstractmethod
    def current(self) -> Transaction | None: ...

    def in_transaction(self) -> bool:
        return self.current() is not None

    @property
    @abstractmethod
    def session(self) -> Session: ...

