"""ETag helpers exposing entity versions for optimistic concurrency."""

from __future__ import annotations

from typing import Any

from flask import Response


def generate_etag(entity: Any) -> str | None:
    """Return the opaque tag for an entity, its ``version`` as a string.

    Versions change on every mutation, so a weak tag over the version number is
    enough for clients to send back in ``If-Match``. Returns ``None`` when the
    entity carries no version.
    """

    version = getattr(entity, "version", None)
    if version is None:
        return None
    return str(int(version))


def set_response_etag(response: Response, entity: Any) -> Response:
    """Attach ``ETag: W/"<version>"`` to a Flask response when possible."""

    value = generate_etag(entity)
    if value is not None:
        response.set_etag(value, weak=True)
    return response
