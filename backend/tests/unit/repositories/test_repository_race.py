"""Two threads racing version-gated writes against one row.

Runs against a file-backed SQLite database so each thread gets its own
connection and application context.
"""

from __future__ import annotations

import threading

import pytest

from catetin.core.config import TestingConfig
from catetin.core.extensions import db as _db
from catetin.factory import create_app
from catetin.repositories import RecordNotFoundError, UserRepository, VersionConflictError
from catetin.uow import SQLAlchemyTransactionManager
from tests.factories import UserFactory

WRITERS = 2


@pytest.fixture()
def file_app(tmp_path):
    class _FileConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'race.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False, "timeout": 15}}

    app = create_app(_FileConfig, instance_relative_config=False)
    with app.app_context():
        _db.create_all()
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()
        _db.engine.dispose()


def _race(app, user_id, work):
    """Run ``work(repo, entity, index)`` in parallel threads released together."""
    barrier = threading.Barrier(WRITERS, timeout=10)
    outcomes: list[str] = []
    errors: list[BaseException] = []
    lock = threading.Lock()

    def _writer(index: int) -> None:
        with app.app_context():
            users = UserRepository(SQLAlchemyTransactionManager())
            entity = users.find_by_id(user_id)
            try:
                barrier.wait()
                work(users, entity, index)
                outcome = "ok"
            except (VersionConflictError, RecordNotFoundError):
                outcome = "conflict"
            except Exception as exc:  # reported by the caller
                with lock:
                    errors.append(exc)
                return
            finally:
                _db.session.remove()
            with lock:
                outcomes.append(outcome)

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(WRITERS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    assert not errors, errors
    return sorted(outcomes)


def test_parallel_updates_only_one_wins(file_app):
    with file_app.app_context():
        user_id = UserRepository(SQLAlchemyTransactionManager()).create(UserFactory.build()).id

    def _rename(users, entity, index):
        entity.rename(f"Writer {index}")
        entity.increment_version()
        users.update(entity)

    assert _race(file_app, user_id, _rename) == ["conflict", "ok"]

    with file_app.app_context():
        stored = UserRepository(SQLAlchemyTransactionManager()).find_by_id(user_id)
        assert stored.version == 1
        assert stored.full_name in {"Writer 0", "Writer 1"}


def test_parallel_gated_deletes_only_one_wins(file_app):
    with file_app.app_context():
        user_id = UserRepository(SQLAlchemyTransactionManager()).create(UserFactory.build()).id

    def _delete(users, entity, _index):
        users.delete(entity.id, expected_version=entity.version)

    assert _race(file_app, user_id, _delete) == ["conflict", "ok"]

    with file_app.app_context(), pytest.raises(RecordNotFoundError):
        UserRepository(SQLAlchemyTransactionManager()).find_by_id(user_id)
