from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way password hashing."""

    def hash(self, raw: str) -> str: ...

    def verify(self, hashed: str, raw: str) -> bool: ...

    def dummy_hash(self) -> str:
        """A well-formed hash of no real password, stable per method."""
        ...


class PlainTextPasswordHasher(PasswordHasher):
    """Reversible marker "hash" used in unit tests. Never wire it in an app."""

    PREFIX = "plain$"

    def hash(self, raw: str) -> str:
        return f"{self.PREFIX}{raw}"

    def verify(self, hashed: str, raw: str) -> bool:
        return hashed == f"{self.PREFIX}{raw}"

    def dummy_hash(self) -> str:
        return f"{self.PREFIX}\x00"
