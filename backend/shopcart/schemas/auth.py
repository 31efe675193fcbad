"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

_device_id = dict(load_default=None, allow_none=True, validate=validate.Length(min=1, max=128))


class RegisterSchema(Schema):
    """Input payload for password account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    device_id = fields.String(**_device_id)


class LoginSchema(Schema):
    """Input payload for password login."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    device_id = fields.String(**_device_id)


class DevLoginSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=254))
    device_id = fields.String(**_device_id)


class RefreshSchema(Schema):
    """Input payload carrying a refresh token (refresh and logout)."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=512))
    device_id = fields.String(**_device_id)


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(required=True)
    expires_in = fields.Integer(required=True)
    shopper_id = fields.String(required=True)
    device_id = fields.String(allow_none=True)


class PrincipalSchema(Schema):
    """Response payload describing the authenticated shopper."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    name = fields.String(required=True)
    provider = fields.String(required=True)
    cart_ids = fields.List(fields.String(), required=True)
