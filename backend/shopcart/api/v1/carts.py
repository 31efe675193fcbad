"""Cart sharing endpoints."""

from __future__ import annotations

from flask import Blueprint

from shopcart.api.deps import current_context, json_body, json_response, require_auth, timing
from shopcart.schemas import PermissionEntrySchema, ShareCreateSchema, ShareSchema
from shopcart.services.sharing.dto import ShareIn
from shopcart.services.sharing.service import SharingService

bp = Blueprint("carts", __name__)

share_create_schema = ShareCreateSchema()
share_schema = ShareSchema()
entries_schema = PermissionEntrySchema(many=True)


@bp.post("/<string:cart_id>/shares")
@require_auth
@timing
def share_cart(cart_id: str):
    """Grant (or replace) a shopper's permission on the cart. Needs ADMIN."""

    data = share_create_schema.load(json_body())
    service = SharingService(ctx=current_context())
    result = service.share(
        ShareIn(cart_id=cart_id, target_email=data["target_email"], permission=data["permission"])
    )
    return json_response({"data": share_schema.dump(result)})


@bp.delete("/<string:cart_id>/shares/<string:shopper_id>")
@require_auth
@timing
def unshare_cart(cart_id: str, shopper_id: str):
    """Remove a shopper's entry. Absent entries are a successful no-op. Needs ADMIN."""

    service = SharingService(ctx=current_context())
    removed = service.unshare(cart_id, shopper_id)
    return json_response({"data": {"cart_id": cart_id, "shopper_id": shopper_id, "removed": removed}})


@bp.get("/<string:cart_id>/shares")
@require_auth
@timing
def list_shares(cart_id: str):
    """List the owner and explicit permission entries. Needs VIEW."""

    service = SharingService(ctx=current_context())
    entries = service.list_permissions(cart_id)
    return json_response({"data": entries_schema.dump(entries)})
