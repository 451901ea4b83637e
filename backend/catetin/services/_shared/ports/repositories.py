"""
Record-store capability interfaces.

Services type against these Protocols only; the SQLAlchemy repositories in
:mod:`catetin.repositories` satisfy them structurally, and tests may swap in
fakes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Protocol, TypeVar
from uuid import UUID

from catetin.domain import AuthProvider, MoneyFlow, User, UserAuth

E = TypeVar("E")


class VersionedStore(Protocol[E]):
    """Operations every aggregate store offers."""

    def create(self, entity: E) -> E: ...

    def find_by_id(self, entity_id: UUID) -> E: ...

    def update(self, entity: E) -> E: ...

    def delete(
        self,
        entity_id: UUID,
        *,
        expected_version: int | None = None,
        at: datetime | None = None,
    ) -> None: ...

    def list(self, limit: int, offset: int) -> list[E]: ...

    def count(self) -> int: ...


class UserRepository(VersionedStore[User], Protocol):
    def find_by_phone_number(self, phone_number: str) -> User: ...


class MoneyFlowRepository(VersionedStore[MoneyFlow], Protocol):
    def find_by_user_id(self, user_id: UUID, limit: int, offset: int) -> list[MoneyFlow]: ...

    def count_by_user_id(self, user_id: UUID) -> int: ...

    def count_by_user_id_and_category(self, user_id: UUID, category: str) -> int: ...

    def find_by_user_id_and_date_range(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MoneyFlow]: ...

    def get_total_by_user_id(self, user_id: UUID) -> Decimal: ...

    def get_total_by_user_id_and_category(self, user_id: UUID, category: str) -> Decimal: ...


class UserAuthRepository(VersionedStore[UserAuth], Protocol):
    def find_by_credential_id(self, credential_id: str, auth_provider_id: UUID) -> UserAuth: ...

    def find_by_user_id_and_provider(self, user_id: UUID, auth_provider_id: UUID) -> UserAuth: ...

    def find_by_user_id(self, user_id: UUID) -> list[UserAuth]: ...


class AuthProviderRepository(Protocol):
    """Providers are configuration: lookups return ``None`` on a miss."""

    def create(self, entity: AuthProvider) -> AuthProvider: ...

    def find_by_id(self, entity_id: UUID) -> AuthProvider | None: ...

    def find_by_name(self, name: str) -> AuthProvider | None: ...
