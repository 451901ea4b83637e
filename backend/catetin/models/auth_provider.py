"""``auth_providers`` table."""

from __future__ import annotations

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catetin.core.extensions import db

from .base import ReprMixin, VersionedMixin, active_only


class AuthProviderModel(VersionedMixin, ReprMixin, db.Model):
    """Credential provider configuration (``email-password``, OAuth clients)."""

    __tablename__ = "auth_providers"

    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    client_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_secret: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_auth_providers_name",
            "name",
            unique=True,
            postgresql_where=active_only("name IS NOT NULL"),
            sqlite_where=active_only("name IS NOT NULL"),
        ),
    )
