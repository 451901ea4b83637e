"""``money_flows`` table: expense records."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import JSON, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from catetin.core.extensions import db

from .base import ReprMixin, VersionedMixin

# JSONB on PostgreSQL, plain JSON elsewhere
TagsType = JSON().with_variant(JSONB(), "postgresql")


class MoneyFlowModel(VersionedMixin, ReprMixin, db.Model):
    """
    A single expense.

    Fields
    ------
    amount : Decimal
        Stored as ``NUMERIC(18, 2)``.
    currency : str
        ISO 4217 code, ``IDR`` unless the client says otherwise.
    tags : list[str]
        JSON array, ``[]`` by default.
    """

    __tablename__ = "money_flows"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="IDR", server_default="IDR"
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(
        TagsType, nullable=False, default=list, server_default="[]"
    )
