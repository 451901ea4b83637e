"""``users`` table."""

from __future__ import annotations

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from catetin.core.extensions import db

from .base import ReprMixin, VersionedMixin, active_only


class UserModel(VersionedMixin, ReprMixin, db.Model):
    """
    Persisted principal.

    Fields
    ------
    full_name : str
        Display name.
    phone_number : str
        Natural key; unique among rows where ``deleted_at IS NULL`` so a
        soft-deleted account frees its number for a new sign-up.
    image : str | None
        Avatar URL.
    """

    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    __table_args__ = (
        Index(
            "uq_users_phone_number",
            "phone_number",
            unique=True,
            postgresql_where=active_only(),
            sqlite_where=active_only(),
        ),
    )
