"""Cart sharing schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from shopcart.models.cart import SharePermission


class ShareCreateSchema(Schema):
    """Input payload for sharing a cart with another shopper."""

    target_email = fields.Email(required=True, validate=validate.Length(max=254))
    permission = fields.Enum(
        SharePermission,
        required=True,
        validate=validate.NoneOf([SharePermission.NONE], error="NONE cannot be granted."),
    )


class ShareSchema(Schema):
    cart_id = fields.String(required=True)
    shopper_id = fields.String(required=True)
    email = fields.Email(required=True)
    permission = fields.Enum(SharePermission, required=True)
    replaced = fields.Boolean(required=True)


class PermissionEntrySchema(Schema):
    shopper_id = fields.String(required=True)
    permission = fields.Enum(SharePermission, required=True)
    owner = fields.Boolean(required=True)
