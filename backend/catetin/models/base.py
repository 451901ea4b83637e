"""Reusable SQLAlchemy mixins shared by persisted tables (typed 2.0)."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

#: Predicate shared by every partial index and every read path
ACTIVE_PREDICATE = "deleted_at IS NULL"


def active_only(extra: str | None = None):
    """Return a ``WHERE`` clause for partial indexes over active rows.

    :param extra: Optional additional SQL predicate, ANDed in.
    """
    clause = ACTIVE_PREDICATE if extra is None else f"{ACTIVE_PREDICATE} AND {extra}"
    return text(clause)


class TimestampMixin:
    """Provide ``created_at`` and ``updated_at`` timestamp columns.

    Attributes
    ----------
    created_at:
        Timezone-aware insert time. The store writes it explicitly; the server
        default only covers rows inserted by hand.
    updated_at:
        Timezone-aware time of the last versioned write.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class PKMixin:
    """Expose a UUID primary key column named ``id``."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class VersionedMixin(PKMixin, TimestampMixin):
    """Optimistic-lock token and soft-delete marker on top of id and timestamps.

    Attributes
    ----------
    version:
        Starts at ``0``; each conditional update writes ``version + 1``.
    deleted_at:
        ``NULL`` while the row is active.
    """

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name, id and version."""

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return f"<{cls} id={getattr(self, 'id', None)} v={getattr(self, 'version', None)}>"
