from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


class TokenProvider(Protocol):
    """Port for issuing and decoding signed access/refresh tokens."""

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

    def get_subject(self, token: str) -> str: ...

    def get_token_type(self, token: str) -> str: ...

    def get_expires_at(self, token: str) -> datetime: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests."""

    def __init__(self) -> None:
        self._now = datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def _mk(
        self,
        *,
        identity: str,
        ttype: str,
        exp_delta: timedelta,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        self._seq += 1
        token = f"{ttype}.{identity}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": identity,
            "type": ttype,
            "exp": int((self._now + exp_delta).timestamp()),
            **(additional_claims or {}),
        }
        self._issued[token] = payload
        return token

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype="access",
            exp_delta=expires_delta or timedelta(minutes=60),
            additional_claims=additional_claims,
        )

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype="refresh",
            exp_delta=expires_delta or timedelta(days=30),
            additional_claims=additional_claims,
        )

    def decode(self, token: str) -> dict[str, Any]:
        return self._issued[token]

    def get_subject(self, token: str) -> str:
        return str(self.decode(token)["sub"])

    def get_token_type(self, token: str) -> str:
        return str(self.decode(token)["type"])

    def get_expires_at(self, token: str) -> datetime:
        exp = int(self.decode(token)["exp"])
        return datetime.fromtimestamp(exp, tz=UTC)
