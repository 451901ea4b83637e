"""Repository package: the optimistic record store over SQLAlchemy."""

from __future__ import annotations

from catetin.repositories.auth_provider import AuthProviderRepository
from catetin.repositories.base import Page, VersionedRepository, clamp_window
from catetin.repositories.errors import (
    DuplicateRecordError,
    RecordNotFoundError,
    StoreError,
    UnknownStoreError,
    VersionConflictError,
    classify,
    translate_store_errors,
)
from catetin.repositories.money_flow import MoneyFlowRepository
from catetin.repositories.user import UserRepository
from catetin.repositories.user_auth import UserAuthRepository

__all__ = [
    # Base
    "Page",
    "VersionedRepository",
    "clamp_window",
    # Errors
    "StoreError",
    "RecordNotFoundError",
    "VersionConflictError",
    "DuplicateRecordError",
    "UnknownStoreError",
    "classify",
    "translate_store_errors",
    # Aggregates
    "AuthProviderRepository",
    "MoneyFlowRepository",
    "UserAuthRepository",
    "UserRepository",
]
