"""Transaction manager abstractions and the SQLAlchemy implementation.

Services depend on :class:`TransactionManager`; repositories ask it for the
session of the transaction bound to the current context.
"""

from .base import NoActiveTransactionError, Transaction, TransactionManager
from .sqlalchemy_uow import SQLAlchemyTransactionManager, discard_leaked_transaction, init_app

__all__ = [
    "NoActiveTransactionError",
    "SQLAlchemyTransactionManager",
    "Transaction",
    "TransactionManager",
    "discard_leaked_transaction",
    "init_app",
]
