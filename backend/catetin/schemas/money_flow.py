"""Money flow (expense) resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

CURRENCY = validate.Regexp(r"^[A-Za-z]{3}$", error="Currency must be a 3-letter ISO code.")
TAG = fields.String(validate=validate.Length(min=1, max=50))


class MoneyFlowCreateSchema(Schema):
    """Payload for recording an expense."""

    class Meta:
        unknown = EXCLUDE

    amount = fields.Decimal(
        required=True, places=2, allow_nan=False, validate=validate.Range(min=0, min_inclusive=False)
    )
    currency = fields.String(load_default="IDR", validate=CURRENCY)
    category = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))
    description = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(max=500)
    )
    tags = fields.List(TAG, load_default=list, validate=validate.Length(max=20))


class MoneyFlowUpdateSchema(Schema):
    """Partial expense update. Absent keys are left untouched."""

    class Meta:
        unknown = EXCLUDE

    version = fields.Integer(load_default=None, validate=validate.Range(min=0))
    amount = fields.Decimal(
        places=2, allow_nan=False, validate=validate.Range(min=0, min_inclusive=False)
    )
    currency = fields.String(validate=CURRENCY)
    category = fields.String(allow_none=True, validate=validate.Length(max=100))
    description = fields.String(allow_none=True, validate=validate.Length(max=500))
    tags = fields.List(TAG, validate=validate.Length(max=20))


class MoneyFlowSchema(Schema):
    """Public representation of an expense."""

    id = fields.UUID(required=True)
    user_id = fields.UUID(required=True)
    amount = fields.Decimal(required=True, as_string=True)
    currency = fields.String(required=True)
    category = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    tags = fields.List(fields.String(), required=True)
    version = fields.Integer(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)


class MoneyFlowSummaryQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    category = fields.String(load_default=None, validate=validate.Length(min=1, max=100))


class MoneyFlowSummarySchema(Schema):
    total = fields.Decimal(required=True, as_string=True)
    count = fields.Integer(required=True)
    category = fields.String(allow_none=True)
