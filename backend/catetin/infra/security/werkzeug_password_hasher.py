"""Password hashing adapter over :mod:`werkzeug.security`."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from functools import lru_cache

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from catetin.services._shared.ports import PasswordHasher

DEFAULT_METHOD = "scrypt"


@lru_cache(maxsize=8)
def _dummy_hash(method: str) -> str:
    return generate_password_hash(secrets.token_urlsafe(32), method=method)


@dataclass(slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Salted one-way hashes via ``generate_password_hash``.

    :param method: Werkzeug method string (``"scrypt"``,
        ``"pbkdf2:sha256:600000"``...). When ``None`` the app's
        ``PASSWORD_HASH_METHOD`` setting is read at hash time.
    """

    method: str | None = None

    def _method(self) -> str:
        if self.method is not None:
            return self.method
        return str(current_app.config.get("PASSWORD_HASH_METHOD", DEFAULT_METHOD))

    def hash(self, raw: str) -> str:
        return generate_password_hash(raw, method=self._method())

    def verify(self, hashed: str, raw: str) -> bool:
        if not hashed:
            return False
        # ``check_password_hash`` reads the method from the stored hash itself
        return bool(check_password_hash(hashed, raw))

    def dummy_hash(self) -> str:
        """
        Hash of a random secret, generated once per method.

        Verifying against it costs the same as verifying a real credential.
        """
        return _dummy_hash(self._method())
