"""
catetin.services._shared.ports
==============================

*Ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`repositories`:
    Record-store capabilities per aggregate (users, money flows, credential
    links, auth providers).
- :mod:`token_provider`:
    :class:`~.TokenProvider`, abstraction for signed token creation/decoding.
- :mod:`password_hasher`:
    :class:`~.PasswordHasher`, one-way password hashing.

Concrete adapters live under ``catetin.repositories`` and ``catetin.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher, PlainTextPasswordHasher
from .repositories import (
    AuthProviderRepository,
    MoneyFlowRepository,
    UserAuthRepository,
    UserRepository,
    VersionedStore,
)
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "AuthProviderRepository",
    "MoneyFlowRepository",
    "PasswordHasher",
    "PlainTextPasswordHasher",
    "StubTokenProvider",
    "TokenProvider",
    "UserAuthRepository",
    "UserRepository",
    "VersionedStore",
]
