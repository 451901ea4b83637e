"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthResponseSchema, LoginSchema, RegisterSchema
from .common import DateRangeQuerySchema, MetaSchema, PaginationQuerySchema, build_meta
from .money_flow import (
    MoneyFlowCreateSchema,
    MoneyFlowSchema,
    MoneyFlowSummaryQuerySchema,
    MoneyFlowSummarySchema,
    MoneyFlowUpdateSchema,
)
from .user import UserSchema, UserUpdateSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "AuthResponseSchema",
    "PaginationQuerySchema",
    "DateRangeQuerySchema",
    "MetaSchema",
    "build_meta",
    "UserSchema",
    "UserUpdateSchema",
    "MoneyFlowSchema",
    "MoneyFlowCreateSchema",
    "MoneyFlowUpdateSchema",
    "MoneyFlowSummaryQuerySchema",
    "MoneyFlowSummarySchema",
]
