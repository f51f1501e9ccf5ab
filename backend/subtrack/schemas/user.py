"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserUpdateSchema(Schema):
    """Partial update of a user's own account."""

    name = fields.String(validate=validate.Length(min=2, max=50))
    email = fields.Email(validate=validate.Length(max=254))
    password = fields.String(load_only=True, validate=validate.Length(min=6, max=128))


class UserSchema(Schema):
    """Public representation of a user entity. The password hash is never dumped."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    created_at = fields.DateTime(required=True, data_key="createdAt")
    updated_at = fields.DateTime(required=True, data_key="updatedAt")
