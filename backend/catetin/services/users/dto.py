"""
DTOs for UserService.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Partial profile update.

    :param version: Version the client last read; the write is gated on it.
    :type version: int
    :param full_name: New display name, or ``None`` to keep it.
    :type full_name: str | None
    :param image: New avatar URL, or ``None`` to keep it.
    :type image: str | None
    :param clear_image: Remove the avatar (wins over ``image``).
    :type clear_image: bool
    """

    version: int
    full_name: str | None = None
    image: str | None = None
    clear_image: bool = False
