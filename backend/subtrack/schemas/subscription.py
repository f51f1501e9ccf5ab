"""Subscription resource schemas.

Clients speak camelCase; the service layer receives snake_case keys through
``data_key``.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from subtrack.models.subscription import CATEGORIES, CURRENCIES, FREQUENCIES, STATUSES


class SubscriptionCreateSchema(Schema):
    """Payload for creating a subscription. The owner comes from the session."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    price = fields.Float(required=True, validate=validate.Range(min=0))
    currency = fields.String(load_default="USD", validate=validate.OneOf(CURRENCIES))
    frequency = fields.String(load_default=None, validate=validate.OneOf(FREQUENCIES))
    category = fields.String(required=True, validate=validate.OneOf(CATEGORIES))
    payment_method = fields.String(
        required=True, data_key="paymentMethod", validate=validate.Length(min=1, max=100)
    )
    status = fields.String(load_default="active", validate=validate.OneOf(STATUSES))
    start_date = fields.DateTime(required=True, data_key="startDate")
    renewal_date = fields.DateTime(load_default=None, data_key="renewalDate")


class SubscriptionUpdateSchema(Schema):
    """Field-wise patch; only the keys present in the body are applied."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=2, max=100))
    price = fields.Float(validate=validate.Range(min=0))
    currency = fields.String(validate=validate.OneOf(CURRENCIES))
    frequency = fields.String(allow_none=True, validate=validate.OneOf(FREQUENCIES))
    category = fields.String(validate=validate.OneOf(CATEGORIES))
    payment_method = fields.String(
        data_key="paymentMethod", validate=validate.Length(min=1, max=100)
    )
    status = fields.String(validate=validate.OneOf(STATUSES))
    start_date = fields.DateTime(data_key="startDate")
    renewal_date = fields.DateTime(allow_none=True, data_key="renewalDate")


class SubscriptionSchema(Schema):
    """Representation of the subscription entity."""

    id = fields.Integer(required=True)
    user_id = fields.Integer(required=True, data_key="userId")
    name = fields.String(required=True)
    price = fields.Float(required=True)
    currency = fields.String(required=True)
    frequency = fields.String(allow_none=True)
    category = fields.String(required=True)
    payment_method = fields.String(required=True, data_key="paymentMethod")
    status = fields.String(required=True)
    start_date = fields.DateTime(required=True, data_key="startDate")
    renewal_date = fields.DateTime(required=True, data_key="renewalDate")
    cancellation_date = fields.DateTime(allow_none=True, data_key="cancellationDate")
    created_at = fields.DateTime(required=True, data_key="createdAt")
    updated_at = fields.DateTime(required=True, data_key="updatedAt")
