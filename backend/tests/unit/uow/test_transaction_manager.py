"""
Unit tests for SQLAlchemyTransactionManager, using the user repository as the
write path.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from catetin.models import UserModel
from catetin.repositories import UserRepository
from catetin.uow import NoActiveTransactionError, SQLAlchemyTransactionManager
from tests.factories import UserFactory


def _count_users(session) -> int:
    return session.execute(select(func.count()).select_from(UserModel)).scalar_one()


class TestScopedTransaction:
    def test_commits_on_success(self, tx, session):
        """
        GIVEN a transaction scope
        WHEN a user is created inside it and the block exits cleanly
        THEN the row is committed and visible afterwards.
        """
        users = UserRepository(tx)
        with tx.transaction():
            users.create(UserFactory.build())

        session.rollback()  # drop anything not committed
        assert _count_users(session) == 1

    def test_rolls_back_on_exception(self, tx, session):
        users = UserRepository(tx)
        with pytest.raises(RuntimeError), tx.transaction():
            users.create(UserFactory.build())
            raise RuntimeError("boom")

        assert _count_users(session) == 0
        assert tx.current() is None

    def test_rolls_back_on_keyboard_interrupt(self, tx, session):
        """
        GIVEN a transaction scope
        WHEN a non-Exception BaseException escapes it
        THEN the writes are still rolled back.
        """
        users = UserRepository(tx)
        with pytest.raises(KeyboardInterrupt), tx.transaction():
            users.create(UserFactory.build())
            raise KeyboardInterrupt

        assert _count_users(session) == 0

    def test_nested_scope_joins_outer_transaction(self, tx, session):
        """
        GIVEN an outer transaction
        WHEN an inner scope is opened and the outer one later fails
        THEN the inner scope reused the outer handle and nothing is committed.
        """
        users = UserRepository(tx)
        with pytest.raises(ValueError), tx.transaction() as outer:
            with tx.transaction() as inner:
                assert inner is outer
                users.create(UserFactory.build())
            users.create(UserFactory.build())
            raise ValueError("late failure")

        assert _count_users(session) == 0

    def test_repository_write_joins_bound_transaction(self, tx, session):
        users = UserRepository(tx)

        def _two_users(txn):
            assert tx.current() is txn
            users.create(UserFactory.build())
            users.create(UserFactory.build())
            raise LookupError("abort")

        with pytest.raises(LookupError):
            tx.run_in_transaction(_two_users)

        assert _count_users(session) == 0

    def test_run_in_transaction_returns_callback_value(self, tx):
        assert tx.run_in_transaction(lambda txn: 42) == 42
        assert tx.in_transaction() is False

    def test_handle_is_unbound_after_scope(self, tx):
        with tx.transaction() as txn:
            assert tx.in_transaction() is True
            assert tx.session is txn.session
        assert tx.current() is None


class TestManualTransaction:
    def test_begin_commit_persists(self, tx, session):
        users = UserRepository(tx)
        txn = tx.begin()
        assert tx.begin() is txn  # already bound
        users.create(UserFactory.build())
        tx.commit()

        assert tx.current() is None
        session.rollback()
        assert _count_users(session) == 1

    def test_begin_rollback_discards(self, tx, session):
        users = UserRepository(tx)
        tx.begin()
        users.create(UserFactory.build())
        tx.rollback()

        assert tx.current() is None
        assert _count_users(session) == 0

    @pytest.mark.parametrize("action", ["commit", "rollback"])
    def test_commit_or_rollback_without_begin_fails(self, tx, action):
        with pytest.raises(NoActiveTransactionError, match=action):
            getattr(tx, action)()


class TestLeakedTransaction:
    def test_app_context_teardown_discards_unfinished_begin(self, app, session):
        """
        GIVEN a manual transaction begun inside an application context
        WHEN the context ends without commit or rollback
        THEN the write is rolled back and no handle stays bound.
        """
        with app.app_context():
            manager = SQLAlchemyTransactionManager()
            manager.begin()
            UserRepository(manager).create(UserFactory.build())

        assert SQLAlchemyTransactionManager().current() is None
        assert _count_users(session) == 0

    def test_teardown_leaves_unbound_context_alone(self, app, tx, session):
        with app.app_context():
            UserRepository(SQLAlchemyTransactionManager()).create(UserFactory.build())

        assert tx.current() is None
        assert _count_users(session) == 1
