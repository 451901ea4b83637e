"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .user import UserSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    full_name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, load_only=True, validate=validate.Length(min=6, max=100)
    )


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, load_only=True, validate=validate.Length(min=6, max=100)
    )


class AuthResponseSchema(Schema):
    """Tokens issued on register/login together with the principal."""

    user = fields.Nested(UserSchema, required=True)
    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(required=True)
    expires_in = fields.Integer(required=True)
