"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class UserUpdateSchema(Schema):
    """Partial profile update; ``version`` may come from ``If-Match`` instead."""

    class Meta:
        unknown = EXCLUDE

    version = fields.Integer(load_default=None, validate=validate.Range(min=0))
    full_name = fields.String(load_default=None, validate=validate.Length(min=2, max=100))
    image = fields.Url(load_default=None, allow_none=True, validate=validate.Length(max=2048))


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.UUID(required=True)
    full_name = fields.String(required=True)
    phone_number = fields.String(required=True)
    image = fields.String(allow_none=True)
    version = fields.Integer(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
