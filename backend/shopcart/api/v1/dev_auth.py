"""Development-only login. Registered only when ``UNSAFE_DEV_AUTH`` is enabled."""

from __future__ import annotations

from flask import Blueprint

from shopcart.api.deps import device_id_header, json_body, json_response, timing
from shopcart.api.v1.auth import _service
from shopcart.schemas import DevLoginSchema, TokenPairSchema

bp = Blueprint("dev_auth", __name__)

dev_login_schema = DevLoginSchema()
token_schema = TokenPairSchema()


@bp.post("/login")
@timing
def dev_login():
    """Issue tokens for any email, creating the shopper as "Dev User" if needed."""

    data = dev_login_schema.load(json_body())
    device_id = data.get("device_id") or device_id_header()
    pair = _service().dev_login(data["email"], device_id)
    return json_response({"data": token_schema.dump(pair)})
