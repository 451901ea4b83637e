"""Versioned entity base shared by every persisted aggregate.

Domain entities are plain dataclasses: the persistence layer maps them to and
from ORM rows, so nothing here imports SQLAlchemy or Flask.

Invariants
----------
* ``version`` starts at ``0`` and grows by exactly one per successful write.
* ``deleted_at`` transitions at most once, from ``None`` to a timestamp.
* ``id`` never changes after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from catetin.domain.errors import EntityAlreadyDeletedError


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(kw_only=True, slots=True)
class VersionedEntity:
    """
    Identity, optimistic-lock token and lifecycle timestamps.

    :param id: Immutable identifier, generated client-side.
    :type id: uuid.UUID
    :param version: Optimistic concurrency token (``>= 0``).
    :type version: int
    :param created_at: Creation time (UTC).
    :type created_at: datetime
    :param updated_at: Last mutation time (UTC).
    :type updated_at: datetime
    :param deleted_at: Soft-delete marker; ``None`` while active.
    :type deleted_at: datetime | None
    """

    id: UUID = field(default_factory=uuid4)
    version: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def touch(self) -> None:
        """Refresh ``updated_at``."""
        self.updated_at = utcnow()

    def increment_version(self) -> None:
        """Advance the version by one before handing the entity to ``update``.

        The store gates the write on ``version - 1`` so a caller that skips
        this step always sees a conflict.
        """
        self.version += 1
        self.touch()

    def soft_delete(self) -> None:
        """Mark the entity deleted in memory.

        :raises EntityAlreadyDeletedError: If ``deleted_at`` is already set.
        """
        if self.deleted_at is not None:
            raise EntityAlreadyDeletedError(f"{type(self).__name__} {self.id} is already deleted")
        now = utcnow()
        self.deleted_at = now
        self.updated_at = now
