"""Repository tests for UserRepository: the versioned store contract."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from freezegun import freeze_time

from catetin.repositories import (
    DuplicateRecordError,
    RecordNotFoundError,
    UserRepository,
    VersionConflictError,
)
from tests.factories import UserFactory


@pytest.fixture()
def users(tx) -> UserRepository:
    return UserRepository(tx)


class TestCreateAndFind:
    def test_create_forces_version_zero_and_stamps_times(self, users):
        entity = UserFactory.build(version=7)
        created = users.create(entity)

        assert created.version == 0
        assert created.created_at == created.updated_at
        fetched = users.find_by_id(created.id)
        assert fetched.version == 0
        assert fetched.full_name == entity.full_name
        assert fetched.created_at.tzinfo is not None

    def test_find_unknown_id_raises_not_found(self, users):
        with pytest.raises(RecordNotFoundError):
            users.find_by_id(uuid.uuid4())

    def test_find_by_phone_number(self, users):
        created = users.create(UserFactory.build(phone_number="ana@example.com"))
        assert users.find_by_phone_number("ana@example.com").id == created.id
        with pytest.raises(RecordNotFoundError):
            users.find_by_phone_number("nobody@example.com")

    def test_duplicate_natural_key_raises_duplicate(self, users):
        users.create(UserFactory.build(phone_number="dup@example.com"))
        with pytest.raises(DuplicateRecordError):
            users.create(UserFactory.build(phone_number="dup@example.com"))


class TestUpdate:
    def test_update_with_incremented_version_succeeds(self, users):
        user = users.create(UserFactory.build())
        user.rename("Renamed")
        user.increment_version()

        updated = users.update(user)

        assert updated.version == 1
        fetched = users.find_by_id(user.id)
        assert fetched.full_name == "Renamed"
        assert fetched.version == 1

    def test_concurrent_writers_only_one_wins(self, users):
        """
        GIVEN two copies of the same user read at version 0
        WHEN both try to save version 1
        THEN the first succeeds and the second gets a version conflict.
        """
        created = users.create(UserFactory.build())
        first = users.find_by_id(created.id)
        second = users.find_by_id(created.id)

        first.rename("First")
        first.increment_version()
        users.update(first)

        second.rename("Second")
        second.increment_version()
        with pytest.raises(VersionConflictError):
            users.update(second)

        assert users.find_by_id(created.id).full_name == "First"

    def test_update_without_increment_conflicts(self, users):
        user = users.create(UserFactory.build())
        user.rename("Nope")
        with pytest.raises(VersionConflictError):
            users.update(user)

    def test_update_of_deleted_row_conflicts(self, users):
        user = users.create(UserFactory.build())
        users.delete(user.id)
        user.increment_version()
        with pytest.raises(VersionConflictError):
            users.update(user)

    def test_update_into_taken_natural_key_is_duplicate(self, users):
        users.create(UserFactory.build(phone_number="taken@example.com"))
        other = users.create(UserFactory.build())
        other.phone_number = "taken@example.com"
        other.increment_version()
        with pytest.raises(DuplicateRecordError):
            users.update(other)


class TestDelete:
    def test_delete_hides_row_and_bumps_version(self, users):
        user = users.create(UserFactory.build())
        users.delete(user.id)

        with pytest.raises(RecordNotFoundError):
            users.find_by_id(user.id)
        audited = users.get_for_audit(user.id)
        assert audited.deleted_at is not None
        assert audited.version == 1

    def test_delete_twice_raises_not_found(self, users):
        user = users.create(UserFactory.build())
        users.delete(user.id)
        with pytest.raises(RecordNotFoundError):
            users.delete(user.id)

    def test_delete_with_stale_expected_version_conflicts(self, users):
        user = users.create(UserFactory.build())
        with pytest.raises(VersionConflictError):
            users.delete(user.id, expected_version=3)
        users.delete(user.id, expected_version=0)

    def test_soft_deleted_row_frees_natural_key(self, users):
        first = users.create(UserFactory.build(phone_number="again@example.com"))
        users.delete(first.id)

        second = users.create(UserFactory.build(phone_number="again@example.com"))
        assert users.find_by_phone_number("again@example.com").id == second.id


class TestListAndCount:
    def test_list_newest_first_and_skips_deleted(self, users):
        with freeze_time("2026-01-01 00:00:00") as frozen:
            created = []
            for _ in range(3):
                created.append(users.create(UserFactory.build()))
                frozen.tick(timedelta(minutes=1))
        users.delete(created[1].id)

        listed = users.list(limit=10, offset=0)

        assert [u.id for u in listed] == [created[2].id, created[0].id]
        assert users.count() == 2

    def test_list_window_is_clamped(self, users):
        with freeze_time("2026-01-01 00:00:00") as frozen:
            for _ in range(3):
                users.create(UserFactory.build())
                frozen.tick(timedelta(seconds=1))

        assert len(users.list(limit=0, offset=-5)) == 1
        assert len(users.list(limit=2, offset=2)) == 1
