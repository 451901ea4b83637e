"""Unit tests for UserService version-gated profile management."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

import pytest
from freezegun import freeze_time
from sqlalchemy import select

from catetin.domain import InvalidEntityError
from catetin.models import UserAuthModel, UserModel
from catetin.repositories import UserAuthRepository, UserRepository
from catetin.repositories.base import as_utc
from catetin.services import RegisterIn, UserService, UserUpdateIn
from catetin.services._shared.errors import (
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
)
from tests.factories import UserFactory


@pytest.fixture()
def service(tx) -> UserService:
    return UserService(tx=tx)


@pytest.fixture()
def user(tx):
    return UserRepository(tx).create(UserFactory.build(full_name="Ana"))


class TestGetProfile:
    def test_returns_active_user(self, service, user):
        assert service.get_profile(user.id).id == user.id

    def test_unknown_user_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get_profile(uuid.uuid4())


class TestUpdateProfile:
    def test_applies_changes_and_bumps_version(self, service, user):
        updated = service.update_profile(
            user.id, UserUpdateIn(version=0, full_name="Ana Putri", image="https://img/a.png")
        )

        assert updated.version == 1
        assert updated.full_name == "Ana Putri"
        assert service.get_profile(user.id).image == "https://img/a.png"

    def test_clear_image(self, service, user):
        service.update_profile(user.id, UserUpdateIn(version=0, image="https://img/a.png"))
        cleared = service.update_profile(user.id, UserUpdateIn(version=1, clear_image=True))
        assert cleared.image is None

    def test_stale_version_is_precondition_failure(self, service, user):
        """
        GIVEN a client that last read version 0
        WHEN someone else already saved version 1
        THEN the stale update fails before any write.
        """
        service.update_profile(user.id, UserUpdateIn(version=0, full_name="First"))

        with pytest.raises(PreconditionFailedError):
            service.update_profile(user.id, UserUpdateIn(version=0, full_name="Second"))
        assert service.get_profile(user.id).full_name == "First"

    def test_lost_race_between_read_and_write_is_conflict(self, tx, user):
        """
        GIVEN a write that sneaks in after the service read the row
        WHEN the service saves
        THEN the gated update reports a version conflict.
        """
        users = UserRepository(tx)

        class _RacingUsers(UserRepository):
            def find_by_id(self, entity_id):
                entity = super().find_by_id(entity_id)
                rival = users.find_by_id(entity_id)
                rival.rename("Rival")
                rival.increment_version()
                users.update(rival)
                return entity

        service = UserService(users=_RacingUsers(tx), tx=tx)
        with pytest.raises(ConflictError) as info:
            service.update_profile(user.id, UserUpdateIn(version=0, full_name="Loser"))

        assert info.value.code == "version_conflict"
        assert users.find_by_id(user.id).full_name == "Ana"

    def test_blank_name_is_rejected(self, service, user):
        with pytest.raises(InvalidEntityError):
            service.update_profile(user.id, UserUpdateIn(version=0, full_name="  "))


class TestDeleteAccount:
    def test_soft_deletes_user_and_links(self, auth_service, provider, service, tx):
        result = auth_service.register(
            RegisterIn(full_name="Ana", email="ana@example.com", password="x12345")
        )

        service.delete_account(result.user.id)

        with pytest.raises(NotFoundError):
            service.get_profile(result.user.id)
        assert UserAuthRepository(tx).find_by_user_id(result.user.id) == []

    def test_links_share_the_account_deletion_time(self, auth_service, provider, service, session):
        result = auth_service.register(
            RegisterIn(full_name="Ana", email="ana@example.com", password="x12345")
        )

        with freeze_time("2026-05-01 10:00:00"):
            service.delete_account(result.user.id)

        user_row = session.get(UserModel, result.user.id, populate_existing=True)
        link_row = session.scalars(
            select(UserAuthModel).where(UserAuthModel.user_id == result.user.id)
        ).one()
        expected = datetime(2026, 5, 1, 10, tzinfo=UTC)
        assert as_utc(user_row.deleted_at) == expected
        assert as_utc(link_row.deleted_at) == expected

    def test_stale_expected_version_conflicts(self, service, user):
        with pytest.raises(ConflictError):
            service.delete_account(user.id, version=5)
        assert service.get_profile(user.id).version == 0

    def test_missing_user_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.delete_account(uuid.uuid4())


def test_list_users_pages_active_users(service, tx):
    users = UserRepository(tx)
    for _ in range(3):
        users.create(UserFactory.build())

    page = service.list_users(limit=2, offset=0)

    assert page.total == 3
    assert len(page.items) == 2
    assert (page.limit, page.offset) == (2, 0)
