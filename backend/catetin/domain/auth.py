"""Credential provider configuration and per-user credential links."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from catetin.domain.base import VersionedEntity


@dataclass(kw_only=True, slots=True)
class AuthProvider(VersionedEntity):
    """
    A way of proving identity (``email-password``, an OAuth client, ...).

    ``name`` is the natural key among active providers; it may be ``None`` for
    providers that are only referenced by id.
    """

    display_name: str
    name: str | None = None
    image: str | None = None
    client_id: str | None = None
    client_secret: str | None = None


@dataclass(kw_only=True, slots=True)
class UserAuth(VersionedEntity):
    """
    Links a user to a provider. At most one active link per
    ``(user_id, auth_provider_id)`` pair.

    :param credential_id: Provider-side login handle (the email for
        ``email-password``).
    :param credential_secret: Password hash; never the raw secret.
    :param credential_refresh: Provider refresh token, when one exists.
    """

    user_id: UUID
    auth_provider_id: UUID
    credential_id: str
    credential_secret: str | None = None
    credential_refresh: str | None = None
