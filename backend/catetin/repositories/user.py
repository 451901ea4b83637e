"""User repository."""

from __future__ import annotations

from catetin.domain.user import User
from catetin.models.user import UserModel
from catetin.repositories.base import VersionedRepository


class UserRepository(VersionedRepository[User, UserModel]):
    """Persistence-only repository for :class:`User`."""

    model = UserModel
    entity_type = User

    def _mutable_columns(self) -> frozenset[str]:
        return frozenset({"full_name", "phone_number", "image"})

    def find_by_phone_number(self, phone_number: str) -> User:
        """Fetch the active user owning ``phone_number``.

        :raises RecordNotFoundError: If no active user has it.
        """
        stmt = self._select_active().where(UserModel.phone_number == phone_number.strip())
        return self._one(stmt, key=phone_number)
