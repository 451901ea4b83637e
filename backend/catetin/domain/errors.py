"""Errors raised by domain entities while enforcing their own invariants."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for entity invariant violations."""


class InvalidEntityError(DomainError, ValueError):
    """An entity was constructed or mutated with an invalid value."""


class EntityAlreadyDeletedError(DomainError):
    """A soft-deleted entity was asked to be deleted again."""
