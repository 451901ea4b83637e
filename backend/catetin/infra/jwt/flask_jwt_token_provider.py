# catetin/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token

from catetin.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Signing algorithm, secret, issuer and default lifetimes come from the
    ``JWT_*`` settings of the current app.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return cast(
            str,
            create_access_token(
                identity=identity,
                additional_claims=additional_claims,
                expires_delta=expires_delta,
            ),
        )

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return cast(
            str,
            create_refresh_token(
                identity=identity,
                additional_claims=additional_claims,
                expires_delta=expires_delta,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        return cast(dict[str, Any], decode_token(token))

    def get_subject(self, token: str) -> str:
        return str(self.decode(token)["sub"])

    def get_token_type(self, token: str) -> str:
        # Flask-JWT-Extended sets "type": "access" | "refresh"
        return cast(str, self.decode(token)["type"])

    def get_expires_at(self, token: str) -> datetime:
        exp = int(self.decode(token)["exp"])
        return datetime.fromtimestamp(exp, tz=UTC)
