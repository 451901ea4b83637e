"""Profile management for the authenticated principal."""

from __future__ import annotations

import logging
from uuid import UUID

from catetin.domain import User
from catetin.repositories import Page
from catetin.repositories import UserAuthRepository as SQLAlchemyUserAuthRepository
from catetin.repositories import UserRepository as SQLAlchemyUserRepository
from catetin.services._shared.base import BaseService, ServiceContext
from catetin.services._shared.ports import UserAuthRepository, UserRepository
from catetin.services.users.dto import UserUpdateIn
from catetin.uow import Transaction, TransactionManager

log = logging.getLogger(__name__)

ENTITY = "User"


class UserService(BaseService):
    """Read, edit and close user accounts with version-gated writes."""

    def __init__(
        self,
        *,
        users: UserRepository | None = None,
        user_auths: UserAuthRepository | None = None,
        tx: TransactionManager | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(tx=tx, ctx=ctx)
        self.users = users or SQLAlchemyUserRepository(self.tx)
        self.user_auths = user_auths or SQLAlchemyUserAuthRepository(self.tx)

    def get_profile(self, user_id: UUID) -> User:
        """:raises NotFoundError: If the account is missing or closed."""
        with self.store_errors(ENTITY, user_id):
            return self.users.find_by_id(user_id)

    def list_users(self, limit: int, offset: int) -> Page[User]:
        limit, offset = self.ensure_window(limit, offset)
        with self.store_errors(ENTITY):
            return Page(
                items=self.users.list(limit, offset),
                total=self.users.count(),
                limit=limit,
                offset=offset,
            )

    def update_profile(self, user_id: UUID, dto: UserUpdateIn) -> User:
        """
        Apply a partial update if the client saw the latest version.

        :raises NotFoundError: If the account is missing or closed.
        :raises PreconditionFailedError: If ``dto.version`` is stale on read.
        :raises ConflictError: If another writer won between read and write
            (``code="version_conflict"``).
        """

        def _apply(_txn: Transaction) -> User:
            user = self.users.find_by_id(user_id)
            self.ensure_version(dto.version, user.version)
            if dto.full_name is not None:
                user.rename(dto.full_name)
            if dto.clear_image:
                user.image = None
            elif dto.image is not None:
                user.image = dto.image
            user.increment_version()
            return self.users.update(user)

        with self.store_errors(ENTITY, user_id):
            user = self.tx.run_in_transaction(_apply)
        log.info("user.updated", extra={"user_id": str(user_id), "version": user.version})
        return user

    def delete_account(self, user_id: UUID, version: int | None = None) -> None:
        """
        Soft-delete the account together with its credential links, so the
        email can be registered again.

        :param version: When given, the account must still carry it.
        """

        def _close(_txn: Transaction) -> None:
            user = self.users.find_by_id(user_id)
            user.soft_delete()
            self.users.delete(user.id, expected_version=version, at=user.deleted_at)
            # Links share the account's deletion time
            for link in self.user_auths.find_by_user_id(user_id):
                self.user_auths.delete(link.id, at=user.deleted_at)

        with self.store_errors(ENTITY, user_id):
            self.tx.run_in_transaction(_close)
        log.info("user.deleted", extra={"user_id": str(user_id)})
