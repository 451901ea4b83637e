"""Service layer public API.

Callers import from :mod:`catetin.services` without knowing the internal
layout.

Re-exports
----------
- Base primitives (from ``catetin.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth service (from ``catetin.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`AuthResultOut`,
      :class:`AuthTokenConfig`

- User service (from ``catetin.services.users``)
    * :class:`UserService`
    * DTOs: :class:`UserUpdateIn`

- Money flow service (from ``catetin.services.money_flows``)
    * :class:`MoneyFlowService`
    * DTOs: :class:`MoneyFlowCreateIn`, :class:`MoneyFlowUpdateIn`,
      :class:`MoneyFlowTotalsOut`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth.dto import AuthResultOut, AuthTokenConfig, LoginIn, RegisterIn
from .auth.service import AuthService
from .money_flows.dto import MoneyFlowCreateIn, MoneyFlowTotalsOut, MoneyFlowUpdateIn
from .money_flows.service import MoneyFlowService
from .users.dto import UserUpdateIn
from .users.service import UserService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "AuthResultOut",
    "AuthTokenConfig",
    # Users
    "UserService",
    "UserUpdateIn",
    # Money flows
    "MoneyFlowService",
    "MoneyFlowCreateIn",
    "MoneyFlowUpdateIn",
    "MoneyFlowTotalsOut",
]
