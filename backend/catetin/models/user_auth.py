"""``user_auths`` table: credential links between users and providers."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catetin.core.extensions import db

from .base import ReprMixin, VersionedMixin, active_only


class UserAuthModel(VersionedMixin, ReprMixin, db.Model):
    """
    One credential per ``(user, provider)`` among active rows.

    ``credential_id`` is indexed because login resolves the link by it.
    """

    __tablename__ = "user_auths"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    auth_provider_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("auth_providers.id", ondelete="CASCADE"), nullable=False
    )
    credential_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    credential_secret: Mapped[str | None] = mapped_column(Text, nullable=True)
    credential_refresh: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_user_auths_user_id_auth_provider_id",
            "user_id",
            "auth_provider_id",
            unique=True,
            postgresql_where=active_only(),
            sqlite_where=active_only(),
        ),
    )
