"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from datetime import timezone
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates_schema


class PaginationQuerySchema(Schema):
    """Validate ``limit``/``offset`` query parameters with configurable defaults."""

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    limit = fields.Integer(validate=validate.Range(min=1))
    offset = fields.Integer(load_default=0, validate=validate.Range(min=0))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("offset", 0)
        return data


class DateRangeQuerySchema(Schema):
    """Optional inclusive ``start``/``end`` window; both or neither."""

    class Meta:
        unknown = EXCLUDE

    start = fields.AwareDateTime(load_default=None, default_timezone=timezone.utc)
    end = fields.AwareDateTime(load_default=None, default_timezone=timezone.utc)

    @validates_schema
    def both_or_neither(self, data: dict[str, Any], **_: Any) -> None:
        if (data.get("start") is None) != (data.get("end") is None):
            raise ValidationError("start and end must be provided together", "start")


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    offset = fields.Integer(required=True)


def build_meta(*, total: int, limit: int, offset: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return {"total": int(total), "limit": int(limit), "offset": int(offset)}
