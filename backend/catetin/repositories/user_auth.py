"""Credential link repository."""

from __future__ import annotations

from uuid import UUID

from catetin.domain.auth import UserAuth
from catetin.models.user_auth import UserAuthModel
from catetin.repositories.base import VersionedRepository


class UserAuthRepository(VersionedRepository[UserAuth, UserAuthModel]):
    """Persistence-only repository for :class:`UserAuth`.

    The owning user and provider are fixed at creation; only the credential
    columns are updatable.
    """

    model = UserAuthModel
    entity_type = UserAuth

    def _mutable_columns(self) -> frozenset[str]:
        return frozenset({"credential_id", "credential_secret", "credential_refresh"})

    def find_by_credential_id(self, credential_id: str, auth_provider_id: UUID) -> UserAuth:
        """Resolve the active link for a login handle under one provider.

        :raises RecordNotFoundError: If nobody registered ``credential_id``.
        """
        stmt = self._select_active().where(
            UserAuthModel.credential_id == credential_id,
            UserAuthModel.auth_provider_id == auth_provider_id,
        )
        return self._one(stmt, key=credential_id)

    def find_by_user_id_and_provider(self, user_id: UUID, auth_provider_id: UUID) -> UserAuth:
        """:raises RecordNotFoundError: If the user has no link for the provider."""
        stmt = self._select_active().where(
            UserAuthModel.user_id == user_id,
            UserAuthModel.auth_provider_id == auth_provider_id,
        )
        return self._one(stmt, key=(str(user_id), str(auth_provider_id)))

    def find_by_user_id(self, user_id: UUID) -> list[UserAuth]:
        """All active links of one user, newest first."""
        stmt = self._select_active().where(UserAuthModel.user_id == user_id)
        return self._all(self._newest_first(stmt))
