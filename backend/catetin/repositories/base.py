"""Versioned repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Mapping between framework-free domain dataclasses and ORM rows.
- The soft-delete filter: every read starts from :meth:`_select_active`.
- Optimistic concurrency: updates are one conditional ``UPDATE`` gated on
  ``version - 1``; zero affected rows is a conflict.
- Deterministic ordering (``created_at DESC`` plus primary-key tiebreaker).
- Error classification through :func:`translate_store_errors`.

Design decisions
----------------
* Repositories never decide a transaction's outcome when one is bound to the
  context; they only run statements on its session.
* A write issued outside any transaction runs in a short transaction of its
  own, so a single store call is always atomic.
* Updates MUST NOT allow mass-assignment: each repo exposes an explicit
  ``_mutable_columns`` whitelist.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import Session

from catetin.domain.base import VersionedEntity, utcnow
from catetin.models.base import VersionedMixin
from catetin.repositories.errors import (
    RecordNotFoundError,
    VersionConflictError,
    translate_store_errors,
)
from catetin.uow import SQLAlchemyTransactionManager, TransactionManager

D = TypeVar("D", bound=VersionedEntity)  # domain entity
M = TypeVar("M", bound=VersionedMixin)  # SQLAlchemy mapped row

log = logging.getLogger(__name__)


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class Page(Generic[D]):
    """Result page with metadata.

    :param items: Entities in the current page, newest first.
    :type items: Sequence[D]
    :param total: Active rows matching the query.
    :type total: int
    :param limit: Page size.
    :type limit: int
    :param offset: Rows skipped before this page.
    :type offset: int
    """

    items: Sequence[D]
    total: int
    limit: int
    offset: int


def clamp_window(limit: int, offset: int) -> tuple[int, int]:
    """Clamp ``limit`` to ``>= 1`` and ``offset`` to ``>= 0``."""
    return max(int(limit), 1), max(int(offset), 0)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops the offset on storage)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ------------------------------ Base repository ------------------------------


class VersionedRepository(Generic[D, M]):
    """Generic, persistence-only repository for a single versioned aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.
    * ``entity_type``: the domain dataclass it maps to.

    Subclasses MAY override:

    * ``_mutable_columns`` to whitelist the columns ``update`` writes.
    * ``_to_domain`` / ``_to_model`` when a column needs conversion.
    """

    model: type[M]
    entity_type: type[D]

    def __init__(self, tx: TransactionManager | None = None) -> None:
        """
        :param tx: Transaction manager whose bound session is used. Defaults to
            the Flask-scoped SQLAlchemy implementation.
        :type tx: TransactionManager | None
        """
        self._tx: TransactionManager = tx or SQLAlchemyTransactionManager()

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Session of the transaction bound to the context, else the ambient one."""
        return self._tx.session

    # ------------------------------ Extensibility ----------------------------

    def _mutable_columns(self) -> frozenset[str]:
        """Columns ``update`` may write besides ``version`` and ``updated_at``."""
        return frozenset()

    def _to_domain(self, row: M) -> D:
        values: dict[str, Any] = {}
        for f in dataclasses.fields(self.entity_type):
            value = getattr(row, f.name)
            if isinstance(value, datetime):
                value = as_utc(value)
            values[f.name] = value
        return self.entity_type(**values)

    def _to_model(self, entity: D) -> M:
        columns = self.model.__table__.columns.keys()
        return self.model(**{name: getattr(entity, name) for name in columns})

    # ------------------------------ Statements -------------------------------

    def _select_active(self) -> Select[Any]:
        """Base ``SELECT`` restricted to rows where ``deleted_at IS NULL``."""
        return (
            select(self.model)
            .where(self.model.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )

    def _newest_first(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.order_by(self.model.created_at.desc(), self.model.id.asc())

    def _one(self, stmt: Select[Any], *, key: Any) -> D:
        with translate_store_errors(self.entity_name, key):
            row = self.session.execute(stmt).scalars().one()
        return self._to_domain(row)

    def _first_or_none(self, stmt: Select[Any], *, key: Any) -> D | None:
        with translate_store_errors(self.entity_name, key):
            row = self.session.execute(stmt.limit(1)).scalars().first()
        return self._to_domain(row) if row is not None else None

    def _all(self, stmt: Select[Any]) -> list[D]:
        with translate_store_errors(self.entity_name):
            rows = self.session.execute(stmt).scalars().all()
        return [self._to_domain(r) for r in rows]

    def _scalar(self, stmt: Select[Any]) -> Any:
        with translate_store_errors(self.entity_name):
            return self.session.execute(stmt).scalar_one()

    # ------------------------------ Operations -------------------------------

    def create(self, entity: D) -> D:
        """Insert ``entity`` with ``version = 0``.

        The store stamps ``created_at``/``updated_at`` and writes them back
        onto the caller's object, which is also returned.

        :raises DuplicateRecordError: On a natural-key collision.
        """
        now = utcnow()
        entity.version = 0
        entity.created_at = now
        entity.updated_at = now
        entity.deleted_at = None
        with translate_store_errors(self.entity_name, entity.id), self._tx.transaction() as txn:
            txn.session.add(self._to_model(entity))
            txn.session.flush()
        return entity

    def find_by_id(self, entity_id: UUID) -> D:
        """Return the active entity with ``entity_id``.

        :raises RecordNotFoundError: If missing or soft-deleted.
        """
        return self._one(self._select_active().where(self.model.id == entity_id), key=entity_id)

    def get_for_audit(self, entity_id: UUID) -> D:
        """Return the entity with ``entity_id`` even when soft-deleted."""
        stmt = select(self.model).where(self.model.id == entity_id)
        return self._one(stmt.execution_options(populate_existing=True), key=entity_id)

    def update(self, entity: D) -> D:
        """Persist ``entity`` if nobody wrote since it was read.

        The caller has already called :meth:`VersionedEntity.increment_version`,
        so the row must still carry ``entity.version - 1``.

        :raises VersionConflictError: If zero rows matched (stale version,
            soft-deleted or unknown id; the cause is not distinguished).
        :raises DuplicateRecordError: If a natural-key column collides.
        """
        entity.touch()
        values = {name: getattr(entity, name) for name in self._mutable_columns()}
        values.update(version=entity.version, updated_at=entity.updated_at)
        stmt = (
            update(self.model)
            .where(
                self.model.id == entity.id,
                self.model.version == entity.version - 1,
                self.model.deleted_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with translate_store_errors(self.entity_name, entity.id), self._tx.transaction() as txn:
            result = txn.session.execute(stmt)
            if result.rowcount != 1:
                log.info(
                    "store.conflict",
                    extra={"entity": self.entity_name, "key": entity.id, "version": entity.version},
                )
                raise VersionConflictError(self.entity_name, entity.id)
        return entity

    def delete(
        self,
        entity_id: UUID,
        *,
        expected_version: int | None = None,
        at: datetime | None = None,
    ) -> None:
        """Soft-delete the active row and bump its version.

        :param expected_version: When given, the row must still carry this
            version.
        :param at: Deletion time to persist, usually the ``deleted_at`` set by
            :meth:`VersionedEntity.soft_delete`. Defaults to now.
        :raises RecordNotFoundError: If no active row has ``entity_id``.
        :raises VersionConflictError: If ``expected_version`` no longer matches.
        """
        now = as_utc(at) if at is not None else utcnow()
        conditions = [self.model.id == entity_id, self.model.deleted_at.is_(None)]
        if expected_version is not None:
            conditions.append(self.model.version == expected_version)
        stmt = (
            update(self.model)
            .where(*conditions)
            .values(deleted_at=now, updated_at=now, version=self.model.version + 1)
            .execution_options(synchronize_session=False)
        )
        with translate_store_errors(self.entity_name, entity_id), self._tx.transaction() as txn:
            if txn.session.execute(stmt).rowcount == 1:
                return
            if expected_version is not None and self._exists_active(entity_id):
                raise VersionConflictError(self.entity_name, entity_id)
            raise RecordNotFoundError(self.entity_name, entity_id)

    def list(self, limit: int, offset: int) -> list[D]:
        """Active entities, newest first."""
        limit, offset = clamp_window(limit, offset)
        return self._all(self._newest_first(self._select_active()).limit(limit).offset(offset))

    def count(self) -> int:
        stmt = (
            select(func.count()).select_from(self.model).where(self.model.deleted_at.is_(None))
        )
        return int(self._scalar(stmt))

    def _exists_active(self, entity_id: UUID) -> bool:
        stmt = select(self.model.id).where(
            self.model.id == entity_id, self.model.deleted_at.is_(None)
        )
        return self.session.execute(stmt).first() is not None
