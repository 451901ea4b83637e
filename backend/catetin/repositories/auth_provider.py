"""Auth provider repository.

Providers are configuration: a lookup miss returns ``None`` instead of
raising, and callers decide whether absence is an error.
"""

from __future__ import annotations

from uuid import UUID

from catetin.domain.auth import AuthProvider
from catetin.models.auth_provider import AuthProviderModel
from catetin.repositories.base import VersionedRepository


class AuthProviderRepository(VersionedRepository[AuthProvider, AuthProviderModel]):
    model = AuthProviderModel
    entity_type = AuthProvider

    def _mutable_columns(self) -> frozenset[str]:
        return frozenset({"display_name", "name", "image", "client_id", "client_secret"})

    def find_by_name(self, name: str) -> AuthProvider | None:
        stmt = self._select_active().where(AuthProviderModel.name == name)
        return self._first_or_none(stmt, key=name)

    def find_by_id(self, entity_id: UUID) -> AuthProvider | None:  # type: ignore[override]
        stmt = self._select_active().where(AuthProviderModel.id == entity_id)
        return self._first_or_none(stmt, key=entity_id)
