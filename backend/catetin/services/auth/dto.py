# catetin/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from catetin.domain import User

EMAIL_PASSWORD_PROVIDER = "email-password"
DEFAULT_ACCESS_EXPIRES = timedelta(minutes=60)
DEFAULT_REFRESH_EXPIRES = timedelta(days=30)

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for email/password registration.

    :param full_name: Display name (2..100 chars, validated by the schema).
    :type full_name: str
    :param email: Login email; also stored as the user's phone number.
    :type email: str
    :param password: Raw password, hashed before persistence.
    :type password: str
    """

    full_name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Tokens issued after a successful registration or login.

    :param user: The authenticated principal.
    :type user: User
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    :param token_type: Always ``"Bearer"``.
    :type token_type: str
    """

    user: User
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    :param provider_name: Credential provider used for email/password.
    :type provider_name: str
    """

    access_expires: timedelta = DEFAULT_ACCESS_EXPIRES
    refresh_expires: timedelta = DEFAULT_REFRESH_EXPIRES
    provider_name: str = EMAIL_PASSWORD_PROVIDER

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        return cls(
            access_expires=config.get("JWT_ACCESS_TOKEN_EXPIRES", DEFAULT_ACCESS_EXPIRES),
            refresh_expires=config.get("JWT_REFRESH_TOKEN_EXPIRES", DEFAULT_REFRESH_EXPIRES),
            provider_name=config.get("EMAIL_PASSWORD_PROVIDER", EMAIL_PASSWORD_PROVIDER),
        )
