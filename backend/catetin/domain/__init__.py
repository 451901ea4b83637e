"""Framework-free domain entities."""

from .auth import AuthProvider, UserAuth
from .base import VersionedEntity, utcnow
from .errors import DomainError, EntityAlreadyDeletedError, InvalidEntityError
from .money_flow import DEFAULT_CURRENCY, MoneyFlow
from .user import User

__all__ = [
    "AuthProvider",
    "DEFAULT_CURRENCY",
    "DomainError",
    "EntityAlreadyDeletedError",
    "InvalidEntityError",
    "MoneyFlow",
    "User",
    "UserAuth",
    "VersionedEntity",
    "utcnow",
]
