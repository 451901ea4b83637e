"""
DTOs for MoneyFlowService.

Amounts travel as :class:`decimal.Decimal`; the API schema parses them from
JSON strings or numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class MoneyFlowCreateIn:
    """
    New expense.

    :param amount: Strictly positive amount.
    :type amount: Decimal
    :param currency: ISO 4217 code.
    :type currency: str
    :param category: Optional category label.
    :type category: str | None
    :param description: Optional note.
    :type description: str | None
    :param tags: Labels, order preserved.
    :type tags: tuple[str, ...]
    """

    amount: Decimal
    currency: str = "IDR"
    category: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class MoneyFlowUpdateIn:
    """
    Partial expense update gated on ``version``.

    ``None`` leaves a field untouched. ``fields_set`` lists the keys the client
    actually sent, so ``category``/``description`` can be cleared explicitly.
    """

    version: int
    amount: Decimal | None = None
    currency: str | None = None
    category: str | None = None
    description: str | None = None
    tags: tuple[str, ...] | None = None
    fields_set: frozenset[str] = frozenset()


# --------------------------------------------------------------------------- #
# Output
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class MoneyFlowTotalsOut:
    """
    Aggregate over a user's active expenses.

    :param total: Sum of amounts (``0`` when there are none).
    :type total: Decimal
    :param count: Number of active expenses for the user.
    :type count: int
    :param category: Category filter applied, if any.
    :type category: str | None
    """

    total: Decimal
    count: int
    category: str | None = None
