"""Expense recording and reporting for one user at a time."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from catetin.domain import MoneyFlow
from catetin.repositories import MoneyFlowRepository as SQLAlchemyMoneyFlowRepository
from catetin.repositories import Page
from catetin.services._shared.base import BaseService, ServiceContext
from catetin.services._shared.errors import NotFoundError, ValidationFailedError
from catetin.services._shared.ports import MoneyFlowRepository
from catetin.services.money_flows.dto import (
    MoneyFlowCreateIn,
    MoneyFlowTotalsOut,
    MoneyFlowUpdateIn,
)
from catetin.uow import Transaction, TransactionManager

log = logging.getLogger(__name__)

ENTITY = "MoneyFlow"


class MoneyFlowService(BaseService):
    """
    CRUD and totals over a user's expenses.

    Every operation is scoped to ``user_id``: an expense owned by someone else
    is reported as not found rather than forbidden, so other users' ids stay hidden.
    """

    def __init__(
        self,
        *,
        flows: MoneyFlowRepository | None = None,
        tx: TransactionManager | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(tx=tx, ctx=ctx)
        self.flows = flows or SQLAlchemyMoneyFlowRepository(self.tx)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def record(self, user_id: UUID, dto: MoneyFlowCreateIn) -> MoneyFlow:
        """Create an expense for ``user_id``.

        :raises InvalidEntityError: If the amount is not strictly positive.
        """
        flow = MoneyFlow.new(user_id, dto.amount, dto.currency)
        flow.set_category(dto.category)
        flow.set_description(dto.description)
        flow.set_tags(dto.tags)
        with self.store_errors(ENTITY, flow.id):
            created = self.flows.create(flow)
        log.info("money_flow.recorded", extra={"user_id": str(user_id), "key": str(created.id)})
        return created

    def update(self, user_id: UUID, flow_id: UUID, dto: MoneyFlowUpdateIn) -> MoneyFlow:
        """
        Apply a partial update if the client saw the latest version.

        :raises NotFoundError: Missing, deleted or owned by someone else.
        :raises PreconditionFailedError: ``dto.version`` is stale on read.
        :raises ConflictError: Another writer won between read and write.
        """

        def _apply(_txn: Transaction) -> MoneyFlow:
            flow = self._owned(user_id, flow_id)
            self.ensure_version(dto.version, flow.version)
            if dto.amount is not None:
                flow.set_amount(dto.amount)
            if dto.currency is not None:
                flow.currency = dto.currency.strip().upper()
            if dto.category is not None or "category" in dto.fields_set:
                flow.set_category(dto.category)
            if dto.description is not None or "description" in dto.fields_set:
                flow.set_description(dto.description)
            if dto.tags is not None:
                flow.set_tags(dto.tags)
            flow.increment_version()
            return self.flows.update(flow)

        with self.store_errors(ENTITY, flow_id):
            updated = self.tx.run_in_transaction(_apply)
        log.info("money_flow.updated", extra={"key": str(flow_id), "version": updated.version})
        return updated

    def delete(self, user_id: UUID, flow_id: UUID, version: int | None = None) -> None:
        def _remove(_txn: Transaction) -> None:
            flow = self._owned(user_id, flow_id)
            flow.soft_delete()
            self.flows.delete(flow.id, expected_version=version, at=flow.deleted_at)

        with self.store_errors(ENTITY, flow_id):
            self.tx.run_in_transaction(_remove)
        log.info("money_flow.deleted", extra={"key": str(flow_id)})

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get(self, user_id: UUID, flow_id: UUID) -> MoneyFlow:
        with self.store_errors(ENTITY, flow_id):
            return self._owned(user_id, flow_id)

    def list(self, user_id: UUID, limit: int, offset: int) -> Page[MoneyFlow]:
        limit, offset = self.ensure_window(limit, offset)
        with self.store_errors(ENTITY):
            return Page(
                items=self.flows.find_by_user_id(user_id, limit, offset),
                total=self.flows.count_by_user_id(user_id),
                limit=limit,
                offset=offset,
            )

    def list_between(self, user_id: UUID, start: datetime, end: datetime) -> list[MoneyFlow]:
        """Expenses created in ``[start, end]``, newest first."""
        if start > end:
            raise ValidationFailedError("start must not be after end")
        with self.store_errors(ENTITY):
            return self.flows.find_by_user_id_and_date_range(user_id, start, end)

    def totals(self, user_id: UUID, category: str | None = None) -> MoneyFlowTotalsOut:
        with self.store_errors(ENTITY):
            if category:
                total = self.flows.get_total_by_user_id_and_category(user_id, category)
                count = self.flows.count_by_user_id_and_category(user_id, category)
            else:
                total = self.flows.get_total_by_user_id(user_id)
                count = self.flows.count_by_user_id(user_id)
        return MoneyFlowTotalsOut(total=total, count=count, category=category or None)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _owned(self, user_id: UUID, flow_id: UUID) -> MoneyFlow:
        flow = self.flows.find_by_id(flow_id)
        if flow.user_id != user_id:
            raise NotFoundError(ENTITY, flow_id)
        return flow
