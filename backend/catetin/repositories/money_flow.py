"""Money flow (expense) repository with per-owner queries and aggregates."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from catetin.domain.money_flow import MoneyFlow
from catetin.models.money_flow import MoneyFlowModel
from catetin.repositories.base import VersionedRepository, as_utc, clamp_window


class MoneyFlowRepository(VersionedRepository[MoneyFlow, MoneyFlowModel]):
    """Persistence-only repository for :class:`MoneyFlow`.

    ``user_id`` is absent from the update whitelist: an expense never changes
    owner.
    """

    model = MoneyFlowModel
    entity_type = MoneyFlow

    def _mutable_columns(self) -> frozenset[str]:
        return frozenset({"category", "amount", "currency", "description", "tags"})

    def _to_domain(self, row: MoneyFlowModel) -> MoneyFlow:
        entity = super()._to_domain(row)
        entity.amount = Decimal(str(entity.amount))
        entity.tags = list(row.tags or [])
        return entity

    def _to_model(self, entity: MoneyFlow) -> MoneyFlowModel:
        row = super()._to_model(entity)
        row.tags = list(entity.tags)
        return row

    # ---------------------------- Owner queries ----------------------------

    def find_by_user_id(self, user_id: UUID, limit: int, offset: int) -> list[MoneyFlow]:
        """Page through one user's active expenses, newest first."""
        limit, offset = clamp_window(limit, offset)
        stmt = self._newest_first(self._select_active().where(MoneyFlowModel.user_id == user_id))
        return self._all(stmt.limit(limit).offset(offset))

    def count_by_user_id(self, user_id: UUID) -> int:
        stmt = select(func.count(MoneyFlowModel.id)).where(
            MoneyFlowModel.user_id == user_id, MoneyFlowModel.deleted_at.is_(None)
        )
        return int(self._scalar(stmt))

    def count_by_user_id_and_category(self, user_id: UUID, category: str) -> int:
        stmt = select(func.count(MoneyFlowModel.id)).where(
            MoneyFlowModel.user_id == user_id,
            MoneyFlowModel.category == category,
            MoneyFlowModel.deleted_at.is_(None),
        )
        return int(self._scalar(stmt))

    def find_by_user_id_and_date_range(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MoneyFlow]:
        """Active expenses created within ``[start, end]`` (both inclusive)."""
        stmt = self._select_active().where(
            MoneyFlowModel.user_id == user_id,
            MoneyFlowModel.created_at >= as_utc(start),
            MoneyFlowModel.created_at <= as_utc(end),
        )
        return self._all(self._newest_first(stmt))

    # ---------------------------- Aggregates -------------------------------

    def get_total_by_user_id(self, user_id: UUID) -> Decimal:
        """Sum of active amounts; ``Decimal(0)`` when there are none."""
        return self._sum(MoneyFlowModel.user_id == user_id)

    def get_total_by_user_id_and_category(self, user_id: UUID, category: str) -> Decimal:
        return self._sum(MoneyFlowModel.user_id == user_id, MoneyFlowModel.category == category)

    def _sum(self, *criteria) -> Decimal:
        stmt = select(func.coalesce(func.sum(MoneyFlowModel.amount), 0)).where(
            MoneyFlowModel.deleted_at.is_(None), *criteria
        )
        return Decimal(str(self._scalar(stmt)))
