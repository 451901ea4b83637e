"""Principal entity."""

from __future__ import annotations

from dataclasses import dataclass

from catetin.domain.base import VersionedEntity
from catetin.domain.errors import InvalidEntityError


@dataclass(kw_only=True, slots=True)
class User(VersionedEntity):
    """
    Account principal. ``phone_number`` is the natural key among active users.

    :param full_name: Display name.
    :type full_name: str
    :param phone_number: Unique contact handle; email-password sign-ups store
        the email here.
    :type phone_number: str
    :param image: Optional avatar URL.
    :type image: str | None
    """

    full_name: str
    phone_number: str
    image: str | None = None

    @classmethod
    def new(cls, full_name: str, phone_number: str) -> User:
        full_name = (full_name or "").strip()
        phone_number = (phone_number or "").strip()
        if not full_name:
            raise InvalidEntityError("full_name must not be empty")
        if not phone_number:
            raise InvalidEntityError("phone_number must not be empty")
        return cls(full_name=full_name, phone_number=phone_number)

    def rename(self, full_name: str) -> None:
        full_name = (full_name or "").strip()
        if not full_name:
            raise InvalidEntityError("full_name must not be empty")
        self.full_name = full_name
