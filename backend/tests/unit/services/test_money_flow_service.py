"""Unit tests for MoneyFlowService ownership, versioning and totals."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from freezegun import freeze_time

from catetin.domain import InvalidEntityError
from catetin.models import MoneyFlowModel
from catetin.repositories import UserRepository
from catetin.repositories.base import as_utc
from catetin.services import MoneyFlowCreateIn, MoneyFlowService, MoneyFlowUpdateIn
from catetin.services._shared.errors import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ValidationFailedError,
)
from tests.factories import UserFactory


@pytest.fixture()
def service(tx) -> MoneyFlowService:
    return MoneyFlowService(tx=tx)


@pytest.fixture()
def owner(tx):
    return UserRepository(tx).create(UserFactory.build())


@pytest.fixture()
def stranger(tx):
    return UserRepository(tx).create(UserFactory.build())


def _record(service, user_id, amount="10000", **kwargs):
    return service.record(user_id, MoneyFlowCreateIn(amount=Decimal(amount), **kwargs))


class TestRecord:
    def test_record_normalizes_input(self, service, owner):
        flow = _record(
            service, owner.id, "15000.50", currency="usd", category="  ", tags=("x", "y")
        )

        assert flow.version == 0
        assert flow.currency == "USD"
        assert flow.category is None
        assert service.get(owner.id, flow.id).tags == ["x", "y"]

    def test_record_rejects_non_positive_amount(self, service, owner):
        with pytest.raises(InvalidEntityError):
            _record(service, owner.id, "0")


class TestOwnership:
    def test_other_users_flow_is_not_found(self, service, owner, stranger):
        flow = _record(service, owner.id)

        with pytest.raises(NotFoundError):
            service.get(stranger.id, flow.id)
        with pytest.raises(NotFoundError):
            service.update(stranger.id, flow.id, MoneyFlowUpdateIn(version=0, category="x"))
        with pytest.raises(NotFoundError):
            service.delete(stranger.id, flow.id)

        assert service.get(owner.id, flow.id).version == 0


class TestUpdate:
    def test_partial_update_keeps_untouched_fields(self, service, owner):
        flow = _record(service, owner.id, category="food", description="lunch")

        updated = service.update(
            owner.id, flow.id, MoneyFlowUpdateIn(version=0, amount=Decimal("20000"))
        )

        assert updated.version == 1
        assert updated.amount == Decimal("20000")
        assert updated.category == "food"
        assert updated.description == "lunch"

    def test_explicit_null_clears_category(self, service, owner):
        flow = _record(service, owner.id, category="food")

        updated = service.update(
            owner.id,
            flow.id,
            MoneyFlowUpdateIn(version=0, category=None, fields_set=frozenset({"category"})),
        )

        assert updated.category is None

    def test_stale_version_is_precondition_failure(self, service, owner):
        flow = _record(service, owner.id)
        service.update(owner.id, flow.id, MoneyFlowUpdateIn(version=0, category="a"))

        with pytest.raises(PreconditionFailedError):
            service.update(owner.id, flow.id, MoneyFlowUpdateIn(version=0, category="b"))


class TestDelete:
    def test_delete_hides_flow(self, service, owner):
        flow = _record(service, owner.id)
        service.delete(owner.id, flow.id)

        with pytest.raises(NotFoundError):
            service.get(owner.id, flow.id)

    def test_delete_with_stale_version_conflicts(self, service, owner):
        flow = _record(service, owner.id)
        with pytest.raises(ConflictError) as info:
            service.delete(owner.id, flow.id, version=2)
        assert info.value.code == "version_conflict"

    def test_delete_persists_entity_deletion_time(self, service, owner, session):
        flow = _record(service, owner.id)

        with freeze_time("2026-05-01 10:00:00"):
            service.delete(owner.id, flow.id, version=0)

        row = session.get(MoneyFlowModel, flow.id, populate_existing=True)
        assert as_utc(row.deleted_at) == datetime(2026, 5, 1, 10, tzinfo=UTC)
        assert row.version == 1


class TestQueries:
    def test_list_pages_only_own_flows(self, service, owner, stranger):
        with freeze_time("2026-05-01 10:00:00") as frozen:
            for amount in ("1", "2", "3"):
                _record(service, owner.id, amount)
                frozen.tick(timedelta(minutes=1))
            _record(service, stranger.id)

        page = service.list(owner.id, limit=2, offset=0)

        assert page.total == 3
        assert [f.amount for f in page.items] == [Decimal("3"), Decimal("2")]

    def test_list_between_rejects_inverted_window(self, service, owner):
        start = datetime(2026, 5, 2, tzinfo=UTC)
        with pytest.raises(ValidationFailedError):
            service.list_between(owner.id, start, start - timedelta(days=1))

    def test_list_between_filters_by_creation_time(self, service, owner):
        with freeze_time("2026-05-01 12:00:00"):
            inside = _record(service, owner.id)
        with freeze_time("2026-06-01 12:00:00"):
            _record(service, owner.id)

        found = service.list_between(
            owner.id, datetime(2026, 5, 1, tzinfo=UTC), datetime(2026, 5, 31, tzinfo=UTC)
        )

        assert [f.id for f in found] == [inside.id]

    def test_totals_overall_and_by_category(self, service, owner):
        _record(service, owner.id, "1000.25", category="food")
        _record(service, owner.id, "500", category="transport")

        overall = service.totals(owner.id)
        food = service.totals(owner.id, category="food")

        assert overall.total == Decimal("1500.25")
        assert overall.count == 2
        assert overall.category is None
        assert food.total == Decimal("1000.25")
        assert food.count == 1
        assert food.category == "food"

    def test_totals_for_unknown_user_are_zero(self, service):
        totals = service.totals(uuid.uuid4())
        assert totals.total == Decimal("0")
        assert totals.count == 0

    def test_category_totals_count_only_that_category(self, service, owner):
        _record(service, owner.id, "10", category="food")
        _record(service, owner.id, "20", category="rent")
        _record(service, owner.id, "30", category="rent")

        food = service.totals(owner.id, category="food")
        rent = service.totals(owner.id, category="rent")

        assert (food.total, food.count) == (Decimal("10"), 1)
        assert (rent.total, rent.count) == (Decimal("50"), 2)
