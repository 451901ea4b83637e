"""Unit tests for the store error classifier."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from catetin.repositories.errors import (
    DuplicateRecordError,
    RecordNotFoundError,
    UnknownStoreError,
    VersionConflictError,
    classify,
    is_unique_violation,
    translate_store_errors,
    violates,
)


class _PgUniqueViolation(Exception):
    sqlstate = "23505"


class _PgForeignKeyViolation(Exception):
    sqlstate = "23503"


def _integrity(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


class TestClassify:
    def test_no_result_is_not_found(self):
        err = classify(NoResultFound(), entity="User", key="k")
        assert isinstance(err, RecordNotFoundError)
        assert err.entity == "User"
        assert err.key == "k"

    def test_stale_data_is_conflict(self):
        assert isinstance(classify(StaleDataError(), entity="User"), VersionConflictError)

    @pytest.mark.parametrize(
        "orig",
        [
            Exception("UNIQUE constraint failed: users.phone_number"),
            Exception('duplicate key value violates unique constraint "uq_users_phone_number"'),
            Exception("Duplicate entry 'a@b.c' for key 'uq_users_phone_number'"),
            _PgUniqueViolation("boom"),
        ],
    )
    def test_unique_violations_are_duplicates(self, orig):
        assert isinstance(classify(_integrity(orig), entity="User"), DuplicateRecordError)

    def test_other_integrity_errors_are_unknown(self):
        exc = _integrity(_PgForeignKeyViolation("violates foreign key constraint"))
        assert is_unique_violation(exc) is False
        assert isinstance(classify(exc, entity="User"), UnknownStoreError)

    def test_arbitrary_errors_are_unknown(self):
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
        assert isinstance(classify(exc, entity="User"), UnknownStoreError)
        assert isinstance(classify(RuntimeError("x"), entity="User"), UnknownStoreError)

    def test_already_classified_errors_pass_through(self):
        original = VersionConflictError("User", "k")
        assert classify(original, entity="Other") is original

    def test_violates_matches_constraint_name(self):
        exc = _integrity(Exception('duplicate key value violates unique constraint "uq_x"'))
        assert violates(exc, "UQ_X") is True
        assert violates(exc, "uq_y") is False


class TestTranslateStoreErrors:
    def test_reraises_classified_with_cause(self):
        """
        GIVEN a driver error inside the block
        THEN a classified error is raised and the original stays reachable.
        """
        orig = _integrity(Exception("UNIQUE constraint failed: users.phone_number"))
        with pytest.raises(DuplicateRecordError) as info:
            with translate_store_errors("User", "a@b.c"):
                raise orig
        assert info.value.__cause__ is orig
        assert info.value.key == "a@b.c"

    def test_store_errors_pass_untouched(self):
        err = RecordNotFoundError("User", 1)
        with pytest.raises(RecordNotFoundError) as info:
            with translate_store_errors("Other"):
                raise err
        assert info.value is err

    def test_non_sqlalchemy_errors_are_not_swallowed(self):
        with pytest.raises(KeyError):
            with translate_store_errors("User"):
                raise KeyError("x")

    def test_messages_name_the_entity(self):
        assert str(RecordNotFoundError("User", "abc")) == "User not found: abc"
        assert str(UnknownStoreError("MoneyFlow")) == "MoneyFlow storage failure"
