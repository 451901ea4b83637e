"""
Service-level exceptions.

These exceptions are **framework-agnostic**: they never import Flask or HTTP
types. They are the stable contract between services and the API layer.

The translation to HTTP responses (RFC 7807) is handled by
``catetin/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` through
      ``BaseService.translate_exceptions``.
    """

    code: str = "bad_request"


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity does not exist (or is soft-deleted, or belongs to
    someone else).

    :param entity: Entity name (e.g., "MoneyFlow").
    :type entity: str
    :param key: Identifier or search key.
    :type key: object
    """

    entity: str
    key: object

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """
    Raised when a write lost an optimistic-concurrency race or hit a business
    uniqueness rule.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    :param code: Stable error code surfaced to clients.
    :type code: str
    """

    entity: str
    detail: str
    code: str = "conflict"

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class EmailAlreadyExistsError(ConflictError):
    """The email is already linked to an active account."""

    def __init__(self, email: str) -> None:
        super().__init__(
            entity="UserAuth", detail="Email already registered", code="email_already_exists"
        )
        self.email = email

    def __str__(self) -> str:
        return "Email already registered"


class PreconditionFailedError(ServiceError):
    """
    Raised when a client-supplied version (``If-Match``) no longer matches.
    """

    code = "precondition_failed"

    def __init__(self, message: str = "Precondition failed (version mismatch)") -> None:
        super().__init__(message)


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password. The two cases are deliberately merged."""

    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class ProviderNotConfiguredError(ServiceError):
    """The credential provider row is missing; an operator must seed it."""

    code = "provider_not_configured"

    def __init__(self, name: str) -> None:
        super().__init__(f"Authentication provider {name!r} is not configured")
        self.name = name


class ValidationFailedError(ServiceError):
    """Input passed schema validation but violates an entity invariant."""

    code = "validation_error"
