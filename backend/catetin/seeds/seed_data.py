"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from catetin.repositories import AuthProviderRepository
from catetin.services import AuthService, MoneyFlowCreateIn, MoneyFlowService, RegisterIn
from catetin.services._shared.errors import EmailAlreadyExistsError

LOGGER = logging.getLogger(__name__)

ACCOUNT_FIXTURES: list[dict[str, str]] = [
    {
        "full_name": "Budi Santoso",
        "email": "budi.santoso@example.com",
        "password": "catetin123",
    },
    {
        "full_name": "Siti Rahayu",
        "email": "siti.rahayu@example.com",
        "password": "hemat2024",
    },
]

MONEY_FLOW_FIXTURES: dict[str, list[dict[str, Any]]] = {
    "budi.santoso@example.com": [
        {"amount": Decimal("25000"), "category": "food", "description": "Nasi goreng", "tags": ("lunch",)},
        {"amount": Decimal("150000"), "category": "transport", "description": "Monthly bus pass"},
        {"amount": Decimal("42500.50"), "category": "food", "tags": ("groceries", "weekly")},
    ],
    "siti.rahayu@example.com": [
        {"amount": Decimal("300000"), "category": "utilities", "description": "Electricity"},
        {"amount": Decimal("75000"), "category": "entertainment", "tags": ("movies",)},
    ],
}


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_providers(*, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Ensure the email/password auth provider row exists."""
    summary: dict[str, dict[str, int]] = {}
    service = AuthService()
    existed = AuthProviderRepository().find_by_name(service.cfg.provider_name) is not None
    provider = service.ensure_email_password_provider()
    _touch(summary, "auth_providers", created=not existed)
    if verbose:
        LOGGER.info("Auth provider ready: %s (%s)", provider.name, provider.id)
    return summary


def seed_accounts(*, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Register demo accounts and give fresh ones a few expenses."""
    summary: dict[str, dict[str, int]] = {}
    auth = AuthService()
    flows = MoneyFlowService()
    auth.ensure_email_password_provider()
    for fixture in ACCOUNT_FIXTURES:
        try:
            result = auth.register(RegisterIn(**fixture))
        except EmailAlreadyExistsError:
            _touch(summary, "users", created=False)
            continue
        _touch(summary, "users", created=True)
        _touch(summary, "user_auths", created=True)
        for row in MONEY_FLOW_FIXTURES.get(fixture["email"], []):
            flows.record(result.user.id, MoneyFlowCreateIn(**row))
            _touch(summary, "money_flows", created=True)
        if verbose:
            LOGGER.info("Seeded account %s", fixture["email"])
    return summary


def run_all(*, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_providers, seed_accounts):
        result = func(verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = ["seed_providers", "seed_accounts", "run_all"]
