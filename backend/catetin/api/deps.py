"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, TypeVar
from uuid import UUID

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from catetin.core.errors import APIError, Unauthorized
from catetin.domain.errors import DomainError
from catetin.schemas.common import PaginationQuerySchema
from catetin.services._shared.base import BaseService
from catetin.services._shared.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])

_IF_MATCH = re.compile(r'^\s*(?:W/)?"?(\d+)"?\s*$')


@dataclass(slots=True)
class Pagination:
    """Container holding pagination arguments parsed from the request."""

    limit: int
    offset: int


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> Pagination:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return Pagination(limit=data["limit"], offset=data["offset"])


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> UUID:
    """Return the authenticated principal's id from the verified JWT subject."""

    identity = get_jwt_identity()
    try:
        return UUID(str(identity))
    except ValueError as exc:
        raise Unauthorized("Invalid token subject", code="invalid_token") from exc


def if_match_version() -> int | None:
    """
    Parse the ``If-Match`` header into an entity version.

    Accepts ``W/"3"``, ``"3"`` and ``3``. Returns ``None`` when the header is
    absent.

    :raises APIError: 400 when the header is present but not a version tag.
    """

    raw = request.headers.get("If-Match")
    if raw is None:
        return None
    match = _IF_MATCH.match(raw)
    if match is None:
        raise APIError("If-Match must carry a version tag", code="invalid_if_match")
    return int(match.group(1))


def required_version(body_version: int | None) -> int:
    """
    Resolve the version a write is gated on.

    ``If-Match`` wins over the body ``version`` field; with neither the request
    fails with 428.
    """

    version = if_match_version()
    if version is None:
        version = body_version
    if version is None:
        raise APIError(
            "Send If-Match or a version field",
            status_code=HTTPStatus.PRECONDITION_REQUIRED,
            code="precondition_required",
        )
    return version


def translate_service_errors(func: F) -> F:
    """Re-raise service and domain errors as API errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except (ServiceError, DomainError) as exc:
            raise BaseService.translate_exceptions(exc) from exc

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def empty_response(status: int = HTTPStatus.NO_CONTENT) -> Response:
    return Response(status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
