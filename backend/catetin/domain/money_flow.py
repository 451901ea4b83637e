"""Expense record entity."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from uuid import UUID

from catetin.domain.base import VersionedEntity
from catetin.domain.errors import InvalidEntityError

DEFAULT_CURRENCY = "IDR"


def _to_amount(value: Decimal | int | float | str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidEntityError(f"amount is not a number: {value!r}") from exc
    if not amount.is_finite() or amount <= 0:
        raise InvalidEntityError("amount must be greater than zero")
    return amount


@dataclass(kw_only=True, slots=True)
class MoneyFlow(VersionedEntity):
    """
    A single expense owned by a user.

    :param user_id: Owner identifier.
    :type user_id: uuid.UUID
    :param amount: Strictly positive amount.
    :type amount: decimal.Decimal
    :param currency: ISO 4217 code, ``IDR`` by default.
    :type currency: str
    :param category: Optional free-form category.
    :type category: str | None
    :param description: Optional note.
    :type description: str | None
    :param tags: Ordered labels.
    :type tags: list[str]
    """

    user_id: UUID
    amount: Decimal
    currency: str = DEFAULT_CURRENCY
    category: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        user_id: UUID,
        amount: Decimal | int | float | str,
        currency: str = DEFAULT_CURRENCY,
    ) -> MoneyFlow:
        """Build an unsaved expense.

        :raises InvalidEntityError: If ``amount`` is not strictly positive.
        """
        return cls(
            user_id=user_id,
            amount=_to_amount(amount),
            currency=(currency or DEFAULT_CURRENCY).strip().upper(),
        )

    def set_amount(self, amount: Decimal | int | float | str) -> None:
        self.amount = _to_amount(amount)

    def set_category(self, category: str | None) -> None:
        self.category = category.strip() if category and category.strip() else None

    def set_description(self, description: str | None) -> None:
        self.description = description

    def add_tag(self, tag: str) -> None:
        """Append ``tag`` stripped; blanks and repeats are ignored."""
        tag = (tag or "").strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)

    def set_tags(self, tags: Iterable[str]) -> None:
        self.tags = []
        for tag in tags:
            self.add_tag(tag)
