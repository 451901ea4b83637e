"""Base class and shared helpers for application services."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from uuid import UUID

from catetin.core import errors as api_errors
from catetin.domain.errors import DomainError
from catetin.repositories.base import clamp_window
from catetin.repositories.errors import (
    DuplicateRecordError,
    RecordNotFoundError,
    VersionConflictError,
)
from catetin.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PreconditionFailedError,
    ProviderNotConfiguredError,
    ServiceError,
    ValidationFailedError,
)
from catetin.uow import SQLAlchemyTransactionManager, TransactionManager

#: Upper bound for list page sizes
MAX_PAGE_SIZE = 100


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids, etc.).

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: UUID | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Own the transaction manager shared by the service's repositories.
    * Centralize error translation to API errors.
    * Offer shared validation helpers (paging window, version preconditions).

    Notes
    -----
    - Services never touch a session directly; repositories do, on the
      session of the transaction bound to the context.
    - Entity invariants live in :mod:`catetin.domain`.
    """

    def __init__(
        self, *, tx: TransactionManager | None = None, ctx: ServiceContext | None = None
    ) -> None:
        """
        :param tx: Transaction manager; defaults to the SQLAlchemy one.
        :type tx: TransactionManager | None
        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.tx: TransactionManager = tx or SQLAlchemyTransactionManager()
        self.ctx = ctx or ServiceContext()

    # ----------------------- Validation utilities ---------------------------

    @staticmethod
    def ensure_window(limit: int, offset: int) -> tuple[int, int]:
        """Clamp a ``limit``/``offset`` pair to ``1..MAX_PAGE_SIZE`` and ``>= 0``."""
        limit, offset = clamp_window(limit, offset)
        return min(limit, MAX_PAGE_SIZE), offset

    @staticmethod
    def ensure_version(expected: int | None, current: int) -> None:
        """
        Validate a client-supplied version before attempting a gated write.

        :param expected: Version the client last saw (``None`` skips the check).
        :param current: Version currently stored.
        :raises PreconditionFailedError: When they differ.
        """
        if expected is not None and expected != current:
            raise PreconditionFailedError(
                f"Precondition failed: expected version {expected}, current is {current}"
            )

    # -------------------------- Error handling ------------------------------

    @staticmethod
    @contextmanager
    def store_errors(entity: str, key: object = None) -> Iterator[None]:
        """
        Re-raise classified store errors as service errors.

        ``UnknownStoreError`` is left alone and surfaces as a 500.

        :param entity: Entity name used in the resulting message.
        :param key: Identifier reported by :class:`NotFoundError`.
        """
        try:
            yield
        except RecordNotFoundError as exc:
            raise NotFoundError(entity, key if key is not None else exc.key) from exc
        except VersionConflictError as exc:
            raise ConflictError(
                entity, "modified concurrently, reload and retry", code="version_conflict"
            ) from exc
        except DuplicateRecordError as exc:
            raise ConflictError(entity, "already exists") from exc

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map service-level and domain errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # → 409 Conflict (email_already_exists, version_conflict, conflict)
            return api_errors.Conflict(str(exc), code=exc.code)

        if isinstance(exc, PreconditionFailedError):
            # → 412 Precondition Failed
            return api_errors.PreconditionFailed(str(exc))

        if isinstance(exc, InvalidCredentialsError):
            # → 401 Unauthorized
            return api_errors.Unauthorized(str(exc), code=exc.code)

        if isinstance(exc, ProviderNotConfiguredError):
            # → 500; an operator must run ``flask seed providers``
            return api_errors.APIError(
                message="Authentication is temporarily unavailable",
                status_code=500,
                code="internal_server_error",
            )

        if isinstance(exc, ValidationFailedError | DomainError):
            # → 422 Unprocessable Entity
            return api_errors.APIError(
                message=str(exc), status_code=422, code="validation_error"
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code=exc.code)

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
