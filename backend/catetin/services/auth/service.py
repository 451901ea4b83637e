# catetin/services/auth/service.py
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from flask import current_app

from catetin.domain import AuthProvider, InvalidEntityError, User, UserAuth
from catetin.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from catetin.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from catetin.repositories import (
    AuthProviderRepository as SQLAlchemyAuthProviderRepository,
)
from catetin.repositories import DuplicateRecordError, RecordNotFoundError
from catetin.repositories import UserAuthRepository as SQLAlchemyUserAuthRepository
from catetin.repositories import UserRepository as SQLAlchemyUserRepository
from catetin.services._shared.base import BaseService, ServiceContext
from catetin.services._shared.errors import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    ProviderNotConfiguredError,
    ValidationFailedError,
)
from catetin.services._shared.ports import (
    AuthProviderRepository,
    PasswordHasher,
    TokenProvider,
    UserAuthRepository,
    UserRepository,
)
from catetin.services.auth.dto import AuthResultOut, AuthTokenConfig, LoginIn, RegisterIn
from catetin.uow import Transaction, TransactionManager

log = logging.getLogger(__name__)

EMAIL_PASSWORD_DISPLAY_NAME = "Email & Password"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService(BaseService):
    """
    Registration and login for the ``email-password`` credential provider.

    Registration writes the user and its credential link in one transaction;
    tokens are issued only after that transaction committed, so a signing
    failure can never leave half an account behind and a rollback can never
    leave a token pointing at nothing.
    """

    def __init__(
        self,
        *,
        users: UserRepository | None = None,
        user_auths: UserAuthRepository | None = None,
        auth_providers: AuthProviderRepository | None = None,
        password_hasher: PasswordHasher | None = None,
        token_provider: TokenProvider | None = None,
        token_cfg: AuthTokenConfig | None = None,
        tx: TransactionManager | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        Every collaborator defaults to the production adapter; the default
        repositories share this service's transaction manager.

        :param users: Principal store.
        :param user_auths: Credential link store.
        :param auth_providers: Provider configuration store.
        :param password_hasher: One-way hasher for secrets.
        :param token_provider: Adapter for issuing JWTs.
        :param token_cfg: Token lifetimes and provider name; read from the
            current app config when omitted.
        """
        super().__init__(tx=tx, ctx=ctx)
        self.users = users or SQLAlchemyUserRepository(self.tx)
        self.user_auths = user_auths or SQLAlchemyUserAuthRepository(self.tx)
        self.auth_providers = auth_providers or SQLAlchemyAuthProviderRepository(self.tx)
        self.hasher = password_hasher or WerkzeugPasswordHasher()
        self.tokens = token_provider or JWTTokenProvider()
        self.cfg = token_cfg or AuthTokenConfig.from_config(current_app.config)

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create a user plus its email/password credential and issue tokens.

        :param dto: Registration input.
        :returns: The new user and a token pair.
        :raises ProviderNotConfiguredError: If the provider row is missing.
        :raises EmailAlreadyExistsError: If the email is already linked,
            including when a concurrent registration wins the race.
        """
        email = normalize_email(dto.email)
        provider = self._email_password_provider()

        if self._find_credential(email, provider.id) is not None:
            raise EmailAlreadyExistsError(email)

        # Hash outside the transaction: it is slow and touches no rows
        secret = self.hasher.hash(dto.password)

        def _persist(_txn: Transaction) -> User:
            user = self.users.create(User.new(dto.full_name, email))
            self.user_auths.create(
                UserAuth(
                    user_id=user.id,
                    auth_provider_id=provider.id,
                    credential_id=email,
                    credential_secret=secret,
                )
            )
            return user

        try:
            user = self.tx.run_in_transaction(_persist)
        except DuplicateRecordError as exc:
            log.info("auth.register.duplicate", extra={"key": email})
            raise EmailAlreadyExistsError(email) from exc
        except InvalidEntityError as exc:
            raise ValidationFailedError(str(exc)) from exc

        log.info("auth.register.ok", extra={"user_id": str(user.id)})
        return self._issue_tokens(user, email)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: The user and a token pair.
        :raises InvalidCredentialsError: For an unknown email, a wrong password
            or a deleted account alike.
        """
        email = normalize_email(dto.email)
        provider = self._email_password_provider()

        link = self._find_credential(email, provider.id)
        # Unknown emails pay for one verify as well
        secret = link.credential_secret if link is not None else None
        verified = self.hasher.verify(secret or self.hasher.dummy_hash(), dto.password)
        if link is None or not verified:
            log.info("auth.login.rejected")
            raise InvalidCredentialsError()

        try:
            user = self.users.find_by_id(link.user_id)
        except RecordNotFoundError as exc:
            log.info("auth.login.rejected", extra={"user_id": str(link.user_id)})
            raise InvalidCredentialsError() from exc

        log.info("auth.login.ok", extra={"user_id": str(user.id)})
        return self._issue_tokens(user, email)

    # ------------------------------------------------------------------ #
    # Provider bootstrap
    # ------------------------------------------------------------------ #

    def ensure_email_password_provider(self) -> AuthProvider:
        """Return the ``email-password`` provider, creating it when missing.

        Safe to run concurrently: losing the insert race returns the winner.
        """
        name = self.cfg.provider_name
        existing = self.auth_providers.find_by_name(name)
        if existing is not None:
            return existing
        try:
            created = self.auth_providers.create(
                AuthProvider(display_name=EMAIL_PASSWORD_DISPLAY_NAME, name=name)
            )
        except DuplicateRecordError:
            winner = self.auth_providers.find_by_name(name)
            if winner is None:
                raise
            return winner
        log.info("auth.provider.created", extra={"key": name})
        return created

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _email_password_provider(self) -> AuthProvider:
        provider = self.auth_providers.find_by_name(self.cfg.provider_name)
        if provider is None:
            log.error("auth.provider.missing", extra={"key": self.cfg.provider_name})
            raise ProviderNotConfiguredError(self.cfg.provider_name)
        return provider

    def _find_credential(self, email: str, provider_id: UUID) -> UserAuth | None:
        try:
            return self.user_auths.find_by_credential_id(email, provider_id)
        except RecordNotFoundError:
            return None

    def _issue_tokens(self, user: User, email: str) -> AuthResultOut:
        claims: dict[str, Any] = {
            "user_id": str(user.id),
            "email": email,
            "full_name": user.full_name,
        }
        access = self.tokens.create_access_token(
            identity=str(user.id),
            additional_claims=claims,
            expires_delta=self.cfg.access_expires,
        )
        refresh = self.tokens.create_refresh_token(
            identity=str(user.id),
            additional_claims=claims,
            expires_delta=self.cfg.refresh_expires,
        )
        return AuthResultOut(
            user=user,
            access_token=access,
            refresh_token=refresh,
            expires_in=int(self.cfg.access_expires.total_seconds()),
        )
